# tests/test_api.py
"""Tests for the validated single and batch entry points."""

from unittest.mock import AsyncMock, patch

import pytest

from webaudit.api import (
    InvalidRequestError,
    analyze,
    analyze_batch,
    parse_analyze_request,
    parse_batch_request,
)
from webaudit.models import AuditOptions, AuditReport


def _report(url, options=None):
    options = options or AuditOptions()
    return AuditReport(
        status="success",
        url=url,
        score=80,
        row_id=options.row_id,
        company_email=options.company_email,
    )


class TestRequestParsing:
    """Test suite for request validation."""

    def test_defaults(self):
        """Test a minimal request."""
        request = parse_analyze_request({"url": "example.com"})

        assert request.url == "https://example.com"
        assert request.options.lighthouse is True
        assert request.options.row_id is None

    def test_options_aliases(self):
        """Test the camelCase row id and integer coercion."""
        request = parse_analyze_request({
            "url": "https://example.com",
            "options": {"lighthouse": False, "rowId": 17, "company_email": "a@b.example"},
        })

        assert request.options.to_options() == AuditOptions(
            lighthouse=False, row_id="17", company_email="a@b.example"
        )

    def test_snake_case_row_id_accepted(self):
        """Test population by field name."""
        request = parse_analyze_request({"url": "example.com", "options": {"row_id": "abc"}})

        assert request.options.row_id == "abc"

    @pytest.mark.parametrize("payload", [
        {},
        {"url": ""},
        {"url": "https://exa mple.com"},
        {"url": 42},
        {"url": "example.com", "options": {"lighthouse": "sometimes"}},
        "not an object",
    ])
    def test_invalid_requests(self, payload):
        """Test rejection of malformed bodies."""
        with pytest.raises(InvalidRequestError, match="Invalid request"):
            parse_analyze_request(payload)

    def test_invalid_request_is_value_error(self):
        """Test that callers can catch validation errors as ValueError."""
        with pytest.raises(ValueError):
            parse_analyze_request({"url": ""})

    def test_empty_batch_is_valid(self):
        """Test that an empty site list parses."""
        assert parse_batch_request({"sites": []}).sites == []

    @pytest.mark.parametrize("payload", [
        {},
        {"sites": "example.com"},
        {"sites": [{"url": ""}]},
        {"sites": [{}]},
    ])
    def test_batch_rejects_malformed_body(self, payload):
        """Test rejection of a missing or non-list site list."""
        with pytest.raises(InvalidRequestError, match="Invalid request"):
            parse_batch_request(payload)

    def test_batch_keeps_invalid_urls(self):
        """Test that batch items are not rejected for their URL."""
        request = parse_batch_request({"sites": [{"url": "ok.example"}, {"url": "bad url"}]})

        assert [site.url for site in request.sites] == ["ok.example", "bad url"]


class TestAnalyze:
    """Test suite for analyze and analyze_batch."""

    @pytest.mark.asyncio
    async def test_analyze_returns_report_dict(self):
        """Test the single-site entry point."""
        audit = AsyncMock(side_effect=lambda url, options, auditor: _report(url, options))

        with patch("webaudit.api.audit_site", audit):
            result = await analyze({"url": "example.com", "options": {"rowId": "r1"}})

        assert result["status"] == "success"
        assert result["url"] == "https://example.com"
        assert result["rowId"] == "r1"
        assert audit.await_args.args[1] == AuditOptions(row_id="r1")

    @pytest.mark.asyncio
    async def test_invalid_request_never_audits(self):
        """Test that no audit starts for an invalid body."""
        audit = AsyncMock()

        with patch("webaudit.api.audit_site", audit):
            with pytest.raises(InvalidRequestError):
                await analyze({"url": "not a url"})

        audit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_batch_keeps_order(self):
        """Test the batch entry point."""

        async def sequential(items, auditor):
            return [_report(url, options) for url, options in items]

        with patch("webaudit.api.audit_sites_sequential", side_effect=sequential):
            result = await analyze_batch({
                "sites": [
                    {"url": "one.example"},
                    {"url": "two.example", "options": {"lighthouse": False}},
                ]
            })

        assert [r["url"] for r in result["reports"]] == [
            "https://one.example", "https://two.example"
        ]

    @pytest.mark.asyncio
    async def test_empty_batch_returns_no_reports(self):
        """Test that an empty batch audits nothing."""
        sequential = AsyncMock()

        with patch("webaudit.api.audit_sites_sequential", sequential):
            result = await analyze_batch({"sites": []})

        assert result == {"reports": []}
        sequential.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_url_only_fails_its_own_site(self):
        """Test that a bad URL becomes an error report in place."""
        audited = []

        async def sequential(items, auditor):
            audited.extend(url for url, _ in items)
            return [_report(url, options) for url, options in items]

        with patch("webaudit.api.audit_sites_sequential", side_effect=sequential):
            result = await analyze_batch({
                "sites": [
                    {"url": "a.example"},
                    {"url": "bad host", "options": {"rowId": 2}},
                    {"url": "c.example"},
                ]
            })

        reports = result["reports"]
        assert [r["status"] for r in reports] == ["success", "error", "success"]
        assert [r["url"] for r in reports] == [
            "https://a.example", "https://bad host", "https://c.example"
        ]
        assert reports[1]["message"] == "Error: Invalid URL: bad host"
        assert reports[1]["rowId"] == "2"
        assert reports[1]["score"] == 0
        assert audited == ["https://a.example", "https://c.example"]

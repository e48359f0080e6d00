"""Command-line interface for the web auditor."""

import asyncio
import json
import sys
from typing import List

from webaudit.api import InvalidRequestError, analyze_batch
from webaudit.auditor import SiteAuditor, audit_sites_sequential
from webaudit.config import Config
from webaudit.logging_config import setup_logging
from webaudit.models import AuditOptions, AuditReport, SiteType
from webaudit.technology_detector import get_site_type_label
from webaudit.utils import is_valid_url, normalize_url


def print_report(report: dict):
    """Print an audit report in a formatted way.

    Args:
        report: Report dict as produced by ``AuditReport.to_dict``
    """
    url = report["url"]
    if report["status"] != "success":
        print(f"\n❌ Failed to audit {url}: {report.get('message', '')}")
        return

    categories = report["categories"]
    print(f"\n{'=' * 60}")
    print(f"Web Audit for: {url}")
    print(f"{'=' * 60}")

    page_info = report.get("pageInfo") or {}
    if page_info.get("title"):
        print(f"Title: {page_info['title']}")

    technologies = report.get("technologies")
    if technologies:
        print(f"Site type: {get_site_type_label(SiteType(technologies['siteType']))}")
        names = [t["name"] for t in technologies["technologies"]]
        if names:
            print(f"Technologies: {', '.join(names)}")

    print(f"\n📊 Overall Score: {report['score']}/100")
    print(f"\nCategory Scores:")
    print(f"  • SEO: {categories['seo']}/100")
    print(f"  • Performance: {categories['performance']}/100")
    print(f"  • Accessibility: {categories['accessibility']}/100")
    print(f"  • Best Practices: {categories['bestPractices']}/100")

    print(f"\n{report['shortSummary']}")

    if report["issues"]:
        print(f"\n⚠️  Issues:")
        for issue in report["issues"]:
            print(f"  • [{issue['severity']}] {issue['type']}: {issue['message']}")

    if report["recommendations"]:
        print(f"\n💡 Recommendations:")
        for rec in report["recommendations"]:
            print(f"  • {rec}")

    if report.get("quickWins"):
        print(f"\n⚡ Quick Wins:")
        for quick_win in report["quickWins"]:
            print(f"  • {quick_win.splitlines()[0]}")

    if report.get("siteTypeAdvice"):
        print(f"\n{report['siteTypeAdvice']}")

    print(f"\n{'=' * 60}\n")


def _write_output(reports: List[dict], args):
    if args.output == "text":
        for report in reports:
            print_report(report)
        return

    output = json.dumps(reports, indent=2, ensure_ascii=False)
    if args.output_file:
        with open(args.output_file, "w") as f:
            f.write(output)
        print(f"Results written to {args.output_file}")
    else:
        print(output)


def analyze_command(args):
    """Audit one or more URLs."""
    for url in args.urls:
        if not is_valid_url(normalize_url(url)):
            print(f"Error: invalid URL: {url}")
            sys.exit(1)

    options = AuditOptions(
        lighthouse=not args.no_lighthouse,
        row_id=args.row_id,
        company_email=args.email,
    )

    auditor = SiteAuditor(args.config)
    reports: List[AuditReport] = asyncio.run(
        audit_sites_sequential([(url, options) for url in args.urls], auditor)
    )

    _write_output([report.to_dict() for report in reports], args)

    if any(not report.is_success for report in reports):
        sys.exit(2)


def batch_command(args):
    """Audit the sites listed in a JSON batch file."""
    try:
        with open(args.file, "r") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: cannot read batch file {args.file}: {e}")
        sys.exit(1)

    try:
        auditor = SiteAuditor(args.config)
        result = asyncio.run(analyze_batch(payload, auditor))
    except InvalidRequestError as e:
        print(f"Error: {e}")
        sys.exit(1)

    _write_output(result["reports"], args)


def _add_output_arguments(subparser):
    subparser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    subparser.add_argument(
        "--output-file",
        "-f",
        help="Write output to file (only for json format)",
    )


def main():
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Web Audit - Score a page's SEO, performance, accessibility and best practices"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging verbosity (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser(
        "analyze", help="Audit one or more URLs, one after another."
    )
    analyze_parser.add_argument(
        "urls", nargs="+", help="URLs to audit (https:// is assumed when missing)"
    )
    _add_output_arguments(analyze_parser)
    analyze_parser.add_argument(
        "--no-lighthouse",
        action="store_true",
        help="Skip the external analyzer; accessibility and best practices are then unavailable",
    )
    analyze_parser.add_argument(
        "--row-id",
        help="Trace id echoed back in every report",
    )
    analyze_parser.add_argument(
        "--email",
        help="Contact email echoed back in every report",
    )
    analyze_parser.set_defaults(func=analyze_command)

    batch_parser = subparsers.add_parser(
        "batch", help='Audit the sites of a JSON file: {"sites": [{"url": ..., "options": {...}}]}'
    )
    batch_parser.add_argument("file", help="Path to the batch JSON file")
    _add_output_arguments(batch_parser)
    batch_parser.set_defaults(func=batch_command)

    args = parser.parse_args()

    try:
        args.config = Config.from_env()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}")
        sys.exit(1)

    setup_logging(
        level=args.log_level or args.config.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

"""Example usage of the web auditor - Single page audit."""

import asyncio

from webaudit import AuditOptions, Config, SiteAuditor, audit_site


async def main():
    """Run example web audit."""

    # Initialize the auditor using .env configuration
    config = Config.from_env()
    auditor = SiteAuditor(config)

    # Audit a single URL (set lighthouse=False when the Lighthouse CLI is not installed)
    url = "https://example.com"
    print(f"Auditing {url}...")

    report = await audit_site(url, AuditOptions(lighthouse=True), auditor)

    if not report.is_success:
        print(f"Failed to audit: {report.message}")
        return

    # Print results
    print(f"\nOverall Score: {report.score}/100")
    print(f"SEO Score: {report.categories.seo}/100")
    print(f"Performance Score: {report.categories.performance}/100")
    print(f"Accessibility Score: {report.categories.accessibility}/100")
    print(f"Best Practices Score: {report.categories.best_practices}/100")

    print(f"\n{report.short_summary}")

    print("\nIssues:")
    for issue in report.issues:
        print(f"  • [{issue['severity']}] {issue['message']}")

    print("\nRecommendations:")
    for rec in report.recommendations:
        print(f"  • {rec}")

    # Site-aware advice
    print("\n" + "=" * 60)
    print(f"Site type: {report.technologies.site_type.value}")
    print("=" * 60)

    for rec in report.contextual_recommendations:
        print(f"\n{rec.title} ({rec.priority.value}, {rec.estimated_time})")
        print(f"  {rec.impact}")

    print(f"\n{report.site_type_advice}")


if __name__ == "__main__":
    asyncio.run(main())

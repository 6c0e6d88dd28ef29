from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from ..models import ArticleSuggestion, CompetitorReport


def export_reports_markdown(
    reports: Sequence[CompetitorReport],
    *,
    suggestions: Sequence[ArticleSuggestion] = (),
    generated_at: Optional[datetime] = None,
) -> str:
    generated_at = generated_at or datetime.now(timezone.utc)
    lines: List[str] = []
    lines.append("# Competitor SEO Analysis")
    lines.append("")
    lines.append(f"Generated: {generated_at.isoformat(timespec='seconds')}")
    lines.append("")
    if not reports:
        lines.append("_No competitor could be analyzed in this run._")
        lines.append("")

    for report in reports:
        lines.append(f"## {report.competitor_name}")
        lines.append("")
        lines.append(f"- Scraped at: {report.scraped_at.isoformat(timespec='seconds')}")
        lines.append(f"- Articles analyzed: {report.total_articles}")
        lines.append("")
        lines.append("### Top keywords")
        lines.append("")
        for keyword, count in report.top_keywords[:10]:
            lines.append(f"- {keyword} ({count})")
        lines.append("")
        lines.append("### Recommendations")
        lines.append("")
        for rec in report.recommendations:
            lines.append(f"- {rec}")
        lines.append("")
        lines.append("### Articles")
        lines.append("")
        for article in report.articles[:10]:
            lines.append(f"- [{article.title}]({article.source_url})")
        lines.append("")
        lines.append("---")
        lines.append("")

    if suggestions:
        lines.append("## Suggested articles")
        lines.append("")
        lines.append("| Priority | Title | Reason |")
        lines.append("| -------- | ----- | ------ |")
        for s in suggestions:
            lines.append(f"| {s.priority} | {s.title} | {s.reason} |")
        lines.append("")
    return "\n".join(lines)


def export_reports_json(
    reports: Sequence[CompetitorReport],
    *,
    suggestions: Sequence[ArticleSuggestion] = (),
    generated_at: Optional[datetime] = None,
) -> str:
    generated_at = generated_at or datetime.now(timezone.utc)
    payload = {
        "generated_at": generated_at.isoformat(),
        "reports": [r.to_dict() for r in reports],
        "suggestions": [
            {
                "title": s.title,
                "slug": s.slug,
                "target_keywords": list(s.target_keywords),
                "outline": list(s.outline),
                "priority": s.priority,
                "reason": s.reason,
            }
            for s in suggestions
        ],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..models import ArticleSignal

TOP_KEYWORDS_LIMIT = 20
VOLUME_THRESHOLD = 50
KEYWORD_COUNT_THRESHOLD = 3
HEADINGS_THRESHOLD = 5
LENGTH_THRESHOLD = 1000

GENERAL_RECOMMENDATIONS: Tuple[str, ...] = (
    "Update content regularly to keep the blog active",
    "Add internal links to strengthen site structure",
    "Optimize meta titles and descriptions with target keywords",
    "Add structured data (Schema.org)",
    "Keep pages mobile friendly and fast to load",
)


def rank_keywords(
    articles: Sequence[ArticleSignal], *, limit: int = TOP_KEYWORDS_LIMIT
) -> List[Tuple[str, int]]:
    """Count keyword hits across articles, most frequent first.

    Ties keep first-seen order: dicts preserve insertion order and ``sorted``
    is stable.
    """
    counts: Dict[str, int] = {}
    for article in articles:
        for keyword in article.keywords:
            counts[keyword] = counts.get(keyword, 0) + 1
    ranked = sorted(counts.items(), key=lambda kv: -kv[1])
    return ranked[:limit]


def derive_recommendations(
    articles: Sequence[ArticleSignal], top_keywords: Sequence[Tuple[str, int]]
) -> List[str]:
    recommendations: List[str] = []

    if len(articles) > VOLUME_THRESHOLD:
        recommendations.append(
            "Competitor publishes a large content library; grow the blog to 100+ articles"
        )

    frequent = [k for k, count in top_keywords if count >= KEYWORD_COUNT_THRESHOLD]
    if frequent:
        recommendations.append(
            f"Popular keywords: {', '.join(frequent)}; cover these keywords in new articles"
        )

    if articles:
        avg_headings = sum(len(a.headings) for a in articles) / len(articles)
        if avg_headings > HEADINGS_THRESHOLD:
            recommendations.append(
                "Competitor articles are well structured; use 5-10 H2/H3 headings per article"
            )
        avg_length = sum(a.word_count for a in articles) / len(articles)
        if avg_length > LENGTH_THRESHOLD:
            recommendations.append(
                f"Competitor articles average {round(avg_length)} characters; write at least 1000 per article"
            )

    recommendations.extend(GENERAL_RECOMMENDATIONS)
    return recommendations

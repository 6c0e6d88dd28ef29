from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    return float(raw) if raw else None


@dataclass(slots=True, frozen=True)
class PipelineConfig:
    """Runtime knobs for one agent run.

    Built from the environment by ``from_env``; tests construct it directly.
    """

    min_articles: int = 5
    max_articles: int = 15
    report_dir: str = "./seo-reports"
    store_path: str = "./data/store.json"
    deploy_targets_csv: str = ""
    competitor_workers: int = 1
    site_workers: int = 4
    competitor_pause: float = 5.0
    article_delay_min: float = 1.0
    article_delay_max: float = 3.0
    max_articles_per_competitor: int = 20
    fetch_timeout: float = 15.0
    run_deadline: Optional[float] = None

    @property
    def deploy_targets(self) -> list[str]:
        return [t.strip() for t in self.deploy_targets_csv.split(",") if t.strip()]

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        defaults = cls()
        config = cls(
            min_articles=_env_int("SEO_MIN_ARTICLES", defaults.min_articles),
            max_articles=_env_int("SEO_MAX_ARTICLES", defaults.max_articles),
            report_dir=os.getenv("SEO_REPORT_DIR", defaults.report_dir),
            store_path=os.getenv("SEO_STORE_PATH", defaults.store_path),
            deploy_targets_csv=os.getenv("SEO_DEPLOY_TARGETS", defaults.deploy_targets_csv),
            competitor_workers=_env_int("SEO_COMPETITOR_WORKERS", defaults.competitor_workers),
            site_workers=_env_int("SEO_SITE_WORKERS", defaults.site_workers),
            competitor_pause=_env_float("SEO_COMPETITOR_PAUSE", defaults.competitor_pause),
            article_delay_min=_env_float("SEO_ARTICLE_DELAY_MIN", defaults.article_delay_min),
            article_delay_max=_env_float("SEO_ARTICLE_DELAY_MAX", defaults.article_delay_max),
            max_articles_per_competitor=_env_int(
                "SEO_MAX_ARTICLES_PER_COMPETITOR", defaults.max_articles_per_competitor
            ),
            fetch_timeout=_env_float("SEO_FETCH_TIMEOUT", defaults.fetch_timeout),
            run_deadline=_env_optional_float("SEO_RUN_DEADLINE"),
        )
        if config.min_articles > config.max_articles:
            raise ValueError(
                f"SEO_MIN_ARTICLES ({config.min_articles}) exceeds SEO_MAX_ARTICLES ({config.max_articles})"
            )
        return config

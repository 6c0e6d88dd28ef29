"""Command-line entrypoint for the SEO content agent.

Four commands map onto the orchestrator:
1) full      analyze competitors, suggest, generate per site, deploy
2) analyze   competitor analysis and suggestions only
3) generate  N random-template articles per active site
4) deploy    redeploy the configured targets
"""

from __future__ import annotations

import argparse
import dataclasses
import random
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from .analysis import CompetitorCrawler, SuggestionEngine
from .fetchers import FetchClient
from .generation import DEFAULT_CATALOG, ContentGenerator
from .orchestrator import Orchestrator
from .output import FileReportSink, GitHubDeployer, RunState
from .processors import Deduplicator, SignalExtractor
from .storage import JsonFileStore
from .utils.config_loader import ConfigError, load_competitors_config
from .utils.logging import configure_logging, get_logger
from .utils.pipeline_config import PipelineConfig


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="SEO content agent – analyze competitors, generate and publish articles"
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="full",
        choices=["full", "analyze", "generate", "deploy"],
        help="Pipeline operation to run (default: full)",
    )
    parser.add_argument(
        "count",
        nargs="?",
        type=int,
        default=10,
        help="Articles per site for the generate command",
    )
    parser.add_argument(
        "--config",
        default="config/competitors.yaml",
        help="Path to competitors configuration file (YAML)",
    )
    parser.add_argument(
        "--store",
        default=None,
        help="Path to the JSON content store (overrides SEO_STORE_PATH)",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Directory for report artifacts (overrides SEO_REPORT_DIR)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log planned deployments instead of dispatching them",
    )
    parser.add_argument(
        "--deadline",
        type=float,
        default=None,
        help="Stop launching new work after this many seconds",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def build_orchestrator(args: argparse.Namespace, cfg: PipelineConfig) -> Orchestrator:
    competitors = load_competitors_config(Path(args.config)) if args.command in ("full", "analyze") else []
    rng = random.Random()

    client = FetchClient(timeout=cfg.fetch_timeout, rng=rng)
    crawler = CompetitorCrawler(
        client,
        SignalExtractor(DEFAULT_CATALOG.keywords),
        max_articles=cfg.max_articles_per_competitor,
        delay_range=(cfg.article_delay_min, cfg.article_delay_max),
        competitor_pause=cfg.competitor_pause,
        max_workers=cfg.competitor_workers,
        rng=rng,
    )
    store = JsonFileStore(cfg.store_path)
    # analyze and generate never deploy
    dry_run = args.dry_run or args.command in ("analyze", "generate")
    return Orchestrator(
        crawler=crawler,
        suggestion_engine=SuggestionEngine(DEFAULT_CATALOG),
        generator=ContentGenerator(DEFAULT_CATALOG, rng=rng),
        deduplicator=Deduplicator(store),
        store=store,
        deployer=GitHubDeployer(dry_run=dry_run),
        sink=FileReportSink(cfg.report_dir),
        competitors=competitors,
        config=cfg,
        rng=rng,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv(override=False)
    args = parse_args(argv)
    configure_logging(level=args.log_level)
    logger = get_logger("seo.agent")

    try:
        cfg = PipelineConfig.from_env()
        overrides = {}
        if args.store:
            overrides["store_path"] = args.store
        if args.report_dir:
            overrides["report_dir"] = args.report_dir
        if overrides:
            cfg = dataclasses.replace(cfg, **overrides)
        orch = build_orchestrator(args, cfg)
    except (ConfigError, ValueError, OSError) as exc:
        logger.error("Failed to start: %s", exc)
        return 1

    if args.command == "analyze":
        report = orch.analyze_only()
    elif args.command == "generate":
        report = orch.generate_only(args.count, deadline=args.deadline)
    elif args.command == "deploy":
        report = orch.deploy_only()
    else:
        report = orch.run_full(deadline=args.deadline)

    print(report.to_markdown())
    return 0 if report.state == RunState.DONE else 1


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())

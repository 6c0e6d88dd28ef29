from __future__ import annotations

import logging
import math
import random
import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .analysis import (
    CompetitorCrawler,
    SuggestionEngine,
    export_reports_json,
    export_reports_markdown,
)
from .generation import ContentGenerator
from .models import ArticleSuggestion, CompetitorConfig, CompetitorReport, GeneratedArticle, Identity, Site
from .output import Deployer, ReportSink, RunReport, RunState
from .processors import Deduplicator
from .storage import Store, StoreWriteFailed
from .utils.logging import StepTimer, get_logger, log_event
from .utils.pipeline_config import PipelineConfig

logger = get_logger("seo.orchestrator")


class PipelineAborted(RuntimeError):
    """Nothing to act on; the run stops."""

    kind = "PipelineAborted"


class NoActiveSites(PipelineAborted):
    kind = "NoActiveSites"


class NoAdminIdentity(PipelineAborted):
    kind = "NoAdminIdentity"


class Orchestrator:
    """Sequence analyze -> suggest -> generate -> deploy over every active site.

    Failures of one fetch, one competitor, one article or one site are
    recorded in the ``RunReport`` and never escape; only "no active sites"
    and "no admin identity" end a run early, in the ``FAILED`` state. Every
    run, finished or aborted, persists its report through the sink.
    """

    def __init__(
        self,
        *,
        crawler: CompetitorCrawler,
        suggestion_engine: SuggestionEngine,
        generator: ContentGenerator,
        deduplicator: Deduplicator,
        store: Store,
        deployer: Deployer,
        sink: ReportSink,
        competitors: Sequence[CompetitorConfig],
        config: Optional[PipelineConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.crawler = crawler
        self.suggestion_engine = suggestion_engine
        self.generator = generator
        self.deduplicator = deduplicator
        self.store = store
        self.deployer = deployer
        self.sink = sink
        self.competitors = list(competitors)
        self.config = config or PipelineConfig()
        self.rng = rng or random.Random()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.state = RunState.IDLE
        self._cancel = threading.Event()
        self._deadline: Optional[float] = None
        self._timer: Optional[threading.Timer] = None
        self._labels: Dict[str, str] = {}
        self._rng_lock = threading.Lock()

    # ---------------- State & cancellation -----------------
    def _transition(self, report: RunReport, state: RunState) -> None:
        logger.info("State %s -> %s", self.state.value, state.value)
        self.state = state
        report.state = state

    def cancel(self) -> None:
        """Stop launching new work; in-flight creates finish first."""
        self._cancel.set()

    def _begin(
        self,
        mode: str,
        deadline: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> RunReport:
        # a cancel() issued before the run still applies to it
        if cancel is not None:
            self._cancel = cancel
        self.state = RunState.IDLE
        limit = deadline if deadline is not None else self.config.run_deadline
        self._deadline = time.monotonic() + limit if limit else None
        if limit:
            # crawls only watch the event, so the deadline has to set it
            self._timer = threading.Timer(limit, self._cancel.set)
            self._timer.daemon = True
            self._timer.start()
        report = RunReport(mode=mode, started_at=self.clock())
        logger.info("=" * 50)
        logger.info("Starting %s run", mode)
        return report

    def _should_stop(self) -> bool:
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._cancel.set()
        return self._cancel.is_set()

    def _stamp(self) -> str:
        return self.clock().strftime("%Y%m%d-%H%M%S")

    def _write(self, report: RunReport, stage: str, name: str, content: str) -> None:
        try:
            report.artifacts.append(self.sink.write_artifact(name, content))
        except (OSError, ValueError) as exc:
            logger.warning("Could not write artifact %s: %s", name, exc)
            report.add_error(stage, "ReportWriteFailed", f"{name}: {exc}")

    def _finish(self, report: RunReport) -> RunReport:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if report.state != RunState.FAILED:
            self._transition(report, RunState.DONE)
        report.cancelled = self._cancel.is_set()
        # the next run starts with a clear flag
        self._cancel = threading.Event()
        report.finished_at = self.clock()
        self._write(report, "report", f"run-{self._stamp()}.json", report.to_json_str())
        log_event(
            logger,
            logging.INFO,
            "run_finished",
            mode=report.mode,
            state=report.state.value,
            created=report.total_created,
            errors=len(report.errors),
        )
        return report

    def _abort(self, report: RunReport, stage: str, exc: PipelineAborted) -> RunReport:
        logger.error("Run aborted in %s: %s", stage, exc)
        report.add_error(stage, exc.kind, str(exc))
        report.fail(stage, exc.kind)
        self.state = RunState.FAILED
        return self._finish(report)

    # ---------------- Stages -----------------
    def _analyze(self, report: RunReport) -> List[CompetitorReport]:
        self._transition(report, RunState.ANALYZING)
        with StepTimer("analyze", logger) as timer:
            try:
                outcomes = self.crawler.analyze_all_detailed(self.competitors, self._cancel)
            except Exception as exc:  # noqa: BLE001 - fall back to catalog-only suggestions
                logger.exception("Competitor analysis failed: %s", exc)
                report.add_error("analyze", "AnalysisFailed", str(exc))
                outcomes = []
        reports = [o.report for o in outcomes if o.report is not None]
        for outcome in outcomes:
            if outcome.error:
                report.add_error("analyze", "FetchFailed", f"{outcome.competitor}: {outcome.error}")
        report.record_stage(
            "analyze",
            "ok" if reports else "degraded",
            f"{len(reports)}/{len(outcomes)} competitor report(s)",
            timer.elapsed,
        )
        return reports

    def _export_analysis(
        self,
        report: RunReport,
        reports: Sequence[CompetitorReport],
        suggestions: Sequence[ArticleSuggestion] = (),
    ) -> None:
        stamp = self._stamp()
        now = self.clock()
        self._write(report, "analyze", f"analysis-{stamp}.json", export_reports_json(reports, suggestions=suggestions, generated_at=now))
        self._write(report, "analyze", f"analysis-{stamp}.md", export_reports_markdown(reports, suggestions=suggestions, generated_at=now))

    def _suggest(self, report: RunReport, reports: Sequence[CompetitorReport]) -> List[ArticleSuggestion]:
        self._transition(report, RunState.SUGGESTING)
        suggestions = self.suggestion_engine.suggest(reports)
        report.record_stage("suggest", "ok", f"{len(suggestions)} suggestion(s)")
        return suggestions

    def _load_targets(self) -> Tuple[List[Site], Identity]:
        sites = self.store.list_active_sites()
        if not sites:
            raise NoActiveSites("no active sites found in the store")
        admin = self.store.find_admin()
        if admin is None:
            raise NoAdminIdentity("no admin identity found in the store")
        logger.info("Found %d active site(s); publishing as %s", len(sites), admin.name)
        return sites, admin

    def _pick_count(self) -> int:
        with self._rng_lock:
            return self.rng.randint(self.config.min_articles, self.config.max_articles)

    def _label(self, site: Site) -> str:
        """Report key for a site; names shared by several sites get the id appended."""
        return self._labels.get(site.id, site.name)

    def _attempt(self, report: RunReport, site: Site, author: Identity, article: GeneratedArticle) -> int:
        try:
            return 1 if self.deduplicator.try_create(site.id, author.id, article) else 0
        except StoreWriteFailed as exc:
            logger.warning("Create failed on %s for '%s': %s", self._label(site), article.title[:30], exc)
            report.add_error("generate", "StoreWriteFailed", str(exc), site=self._label(site))
            return 0

    def _random_batch(self, report: RunReport, site: Site, author: Identity, count: int) -> int:
        created = 0
        for _ in range(max(0, count)):
            if self._should_stop():
                break
            article = self.generator.generate(self.generator.random_template())
            created += self._attempt(report, site, author, article)
        return created

    def _site_batch(
        self,
        report: RunReport,
        site: Site,
        author: Identity,
        suggestions: Sequence[ArticleSuggestion],
        count: int,
    ) -> int:
        """Suggestion-seeded articles first, then random templates to fill ``count``."""
        from_suggestions = 0
        for suggestion in suggestions[: math.ceil(count / 2)]:
            if self._should_stop():
                break
            template = self.generator.match_template(suggestion)
            if template is None:
                logger.debug("No template matches suggestion '%s'", suggestion.title)
                continue
            article = self.generator.generate(template, suggestion)
            from_suggestions += self._attempt(report, site, author, article)

        from_random = self._random_batch(report, site, author, count - from_suggestions)
        return from_suggestions + from_random

    def _for_each_site(
        self,
        report: RunReport,
        sites: Sequence[Site],
        work: Callable[[Site], int],
    ) -> None:
        """Run ``work`` per site in parallel; each site's own sequence stays ordered."""
        names = Counter(site.name for site in sites)
        self._labels = {
            site.id: site.name if names[site.name] == 1 else f"{site.name} ({site.id})" for site in sites
        }
        workers = max(1, min(self.config.site_workers, len(sites)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="site") as executor:
            futures = {executor.submit(work, site): site for site in sites}
            for fut in as_completed(futures):
                label = self._label(futures[fut])
                try:
                    created = fut.result()
                except Exception as exc:  # noqa: BLE001 - one site never stops the others
                    logger.exception("Generation failed for site %s: %s", label, exc)
                    report.add_error("generate", "SiteFailed", str(exc), site=label)
                    created = 0
                report.set_created(label, created)
                logger.info("%s: created %d post(s)", label, created)

    def _generate(
        self,
        report: RunReport,
        sites: Sequence[Site],
        author: Identity,
        suggestions: Sequence[ArticleSuggestion],
    ) -> None:
        self._transition(report, RunState.GENERATING)
        with StepTimer("generate", logger) as timer:
            self._for_each_site(
                report,
                sites,
                lambda site: self._site_batch(report, site, author, suggestions, self._pick_count()),
            )
        report.record_stage("generate", "ok", f"{report.total_created} post(s) created", timer.elapsed)

    def _deploy(self, report: RunReport) -> None:
        self._transition(report, RunState.DEPLOYING)
        targets = self.config.deploy_targets
        report.deploy_attempted = True
        with StepTimer("deploy", logger) as timer:
            try:
                result = self.deployer.deploy(targets)
                report.deploy_success = result.success
                report.deploy_log.extend(result.log)
            except Exception as exc:  # noqa: BLE001 - deployment is best-effort
                logger.exception("Deploy raised: %s", exc)
                report.deploy_success = False
                report.deploy_log.append(str(exc))
        if not report.deploy_success:
            report.add_error("deploy", "DeployFailed", "; ".join(report.deploy_log) or "deploy failed")
        report.record_stage("deploy", "ok" if report.deploy_success else "failed", ", ".join(targets), timer.elapsed)

    # ---------------- Entry points -----------------
    def run_full(
        self,
        *,
        deadline: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> RunReport:
        report = self._begin("full", deadline, cancel)

        reports = self._analyze(report)
        suggestions = self._suggest(report, reports)
        self._export_analysis(report, reports, suggestions)

        try:
            sites, admin = self._load_targets()
        except PipelineAborted as exc:
            return self._abort(report, "generate", exc)

        self._generate(report, sites, admin, suggestions)

        if report.total_created > 0:
            self._deploy(report)
        else:
            logger.info("No new posts; skipping deployment")
            report.record_stage("deploy", "skipped", "no new posts")
        return self._finish(report)

    def analyze_only(self) -> RunReport:
        report = self._begin("analyze")
        reports = self._analyze(report)
        suggestions = self._suggest(report, reports)
        self._export_analysis(report, reports, suggestions)
        for r in reports:
            logger.info(
                "%s: %d article(s), top keywords: %s",
                r.competitor_name,
                r.total_articles,
                ", ".join(k for k, _ in r.top_keywords[:5]),
            )
        return self._finish(report)

    def generate_only(
        self,
        count: int,
        *,
        deadline: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> RunReport:
        report = self._begin("generate", deadline, cancel)
        try:
            sites, admin = self._load_targets()
        except PipelineAborted as exc:
            return self._abort(report, "generate", exc)

        self._transition(report, RunState.GENERATING)
        with StepTimer("generate", logger) as timer:
            self._for_each_site(report, sites, lambda site: self._random_batch(report, site, admin, count))
        report.record_stage("generate", "ok", f"{report.total_created} post(s) created", timer.elapsed)
        return self._finish(report)

    def deploy_only(self) -> RunReport:
        report = self._begin("deploy")
        self._deploy(report)
        return self._finish(report)

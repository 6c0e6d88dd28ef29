from __future__ import annotations

import os
import time
from typing import Callable, Optional, Sequence

from github import Github, GithubException

from ..utils.logging import get_logger
from .deploy import DeployFailed, DeployResult, Deployer

logger = get_logger("seo.output.github")


class GitHubDeployer(Deployer):
    """Redeploy sites by dispatching a GitHub Actions workflow on each target.

    Targets are repository names (``owner/name``); each repository's
    ``workflow`` (file name or id) is dispatched on ``ref`` and is expected to
    build and restart that site.
    """

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        workflow: Optional[str] = None,
        ref: Optional[str] = None,
        dry_run: bool = False,
        client: Optional[Github] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.token = token or os.environ.get("GITHUB_TOKEN") or os.environ.get("GITHUB_API_KEY")
        self.workflow = workflow or os.environ.get("SEO_DEPLOY_WORKFLOW", "deploy.yml")
        self.ref = ref or os.environ.get("SEO_DEPLOY_REF", "main")
        self.dry_run = dry_run
        self.sleep = sleep
        self._client = client or (Github(self.token) if self.token else None)

    def _core_quota(self):
        """Return ``(remaining, reset_epoch)`` for the core API bucket, or Nones."""
        overview = self._client.get_rate_limit()
        bucket = getattr(overview, "core", None)
        if bucket is None:
            bucket = getattr(getattr(overview, "resources", None), "core", None)
        if bucket is None:
            return None, None
        reset_at = getattr(bucket, "reset", None)
        epoch = reset_at.timestamp() if hasattr(reset_at, "timestamp") else None
        return getattr(bucket, "remaining", None), epoch

    def _wait_for_quota(self) -> None:
        if self._client is None:
            return
        try:
            remaining, epoch = self._core_quota()
        except GithubException as exc:
            logger.debug("rate limit lookup failed, dispatching anyway: %s", exc)
            return
        if not (isinstance(remaining, int) and isinstance(epoch, float)):
            return
        if remaining > 1:
            return
        pause = max(0.0, epoch - time.time())
        logger.info("GitHub quota exhausted, waiting %.1fs for reset", pause)
        self.sleep(pause)

    def _dispatch(self, target: str, *, attempts: int = 4, backoff: float = 1.5) -> str:
        last_error: Optional[Exception] = None
        for attempt in range(attempts):
            try:
                self._wait_for_quota()
                repo = self._client.get_repo(target)
                workflow = repo.get_workflow(self.workflow)
                if not workflow.create_dispatch(self.ref):
                    raise DeployFailed(f"workflow {self.workflow} rejected dispatch on {target}@{self.ref}")
                return f"{target}: dispatched {self.workflow}@{self.ref}"
            except GithubException as exc:
                last_error = exc
                status = getattr(exc, "status", None)
                if status in (404, 422):
                    logger.error("GitHub API error %s for %s: %s", status, target, exc)
                    raise DeployFailed(f"{target}: GitHub API error {status}") from exc
                if attempt == attempts - 1:
                    break
                delay = backoff ** attempt
                logger.warning("GitHub API error (%s) for %s. Retrying in %.1fs", status, target, delay)
                self.sleep(delay)
        raise DeployFailed(f"{target}: dispatch failed after {attempts} attempts: {last_error}")

    def deploy(self, targets: Sequence[str]) -> DeployResult:
        if not targets:
            return DeployResult(success=True, log=["no deploy targets configured"])
        if self.dry_run:
            lines = [f"[DRY-RUN] {t}: would dispatch {self.workflow}@{self.ref}" for t in targets]
            for line in lines:
                logger.info(line)
            return DeployResult(success=True, log=lines)
        if self._client is None:
            # content is already published; only the rollout is lost
            line = "GITHUB_TOKEN/GITHUB_API_KEY not set; no workflow dispatched"
            logger.error(line)
            return DeployResult(success=False, log=[line])

        result = DeployResult(success=True)
        for target in targets:
            try:
                line = self._dispatch(target)
                logger.info(line)
            except DeployFailed as exc:
                result.success = False
                line = f"{target}: FAILED {exc}"
                logger.warning(line)
            result.log.append(line)
        return result

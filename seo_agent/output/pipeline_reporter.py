from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional


class RunState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    SUGGESTING = "suggesting"
    GENERATING = "generating"
    DEPLOYING = "deploying"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class RunError:
    stage: str
    kind: str
    message: str
    site: Optional[str] = None


@dataclass(slots=True)
class StageResult:
    status: str
    detail: str = ""
    seconds: float = 0.0


@dataclass
class RunReport:
    """Outcome of one agent run, filled in stage by stage.

    Per-site workers append concurrently, so mutation goes through the
    methods below. Sites are keyed by name, or by "name (id)" when several
    active sites share a name.
    """

    mode: str
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    state: RunState = RunState.IDLE
    failed_stage: Optional[str] = None
    failure_reason: Optional[str] = None
    stages: Dict[str, StageResult] = field(default_factory=dict)
    created_per_site: Dict[str, int] = field(default_factory=dict)
    errors: List[RunError] = field(default_factory=list)
    deploy_attempted: bool = False
    deploy_success: Optional[bool] = None
    deploy_log: List[str] = field(default_factory=list)
    artifacts: List[str] = field(default_factory=list)
    cancelled: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def total_created(self) -> int:
        return sum(self.created_per_site.values())

    def add_error(self, stage: str, kind: str, message: str, site: Optional[str] = None) -> None:
        with self._lock:
            self.errors.append(RunError(stage=stage, kind=kind, message=message, site=site))

    def set_created(self, site: str, count: int) -> None:
        with self._lock:
            self.created_per_site[site] = count

    def record_stage(self, stage: str, status: str, detail: str = "", seconds: float = 0.0) -> None:
        with self._lock:
            self.stages[stage] = StageResult(status=status, detail=detail, seconds=round(seconds, 3))

    def errors_for(self, site: str) -> List[RunError]:
        return [e for e in self.errors if e.site == site]

    def fail(self, stage: str, reason: str) -> None:
        self.state = RunState.FAILED
        self.failed_stage = stage
        self.failure_reason = reason

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "state": self.state.value,
            "failed_stage": self.failed_stage,
            "failure_reason": self.failure_reason,
            "cancelled": self.cancelled,
            "stages": {
                name: {"status": s.status, "detail": s.detail, "seconds": s.seconds}
                for name, s in self.stages.items()
            },
            "created_per_site": dict(self.created_per_site),
            "total_created": self.total_created,
            "errors": [
                {"stage": e.stage, "site": e.site, "kind": e.kind, "message": e.message}
                for e in self.errors
            ],
            "deploy": {
                "attempted": self.deploy_attempted,
                "success": self.deploy_success,
                "log": list(self.deploy_log),
            },
            "artifacts": list(self.artifacts),
        }

    def to_json_str(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)

    def to_markdown(self) -> str:
        lines = [
            "### SEO Agent Run Summary",
            "",
            f"- Mode: {self.mode}",
            f"- State: {self.state.value}"
            + (f" ({self.failed_stage}: {self.failure_reason})" if self.failed_stage else ""),
            f"- Posts created: {self.total_created}",
        ]
        for site, count in sorted(self.created_per_site.items()):
            lines.append(f"  - {site}: {count}")
        if self.deploy_attempted:
            lines.append(f"- Deploy: {'ok' if self.deploy_success else 'failed'}")
        else:
            lines.append("- Deploy: skipped")
        lines.append(f"- Errors: {len(self.errors)}")
        for e in self.errors:
            where = f"{e.stage}/{e.site}" if e.site else e.stage
            lines.append(f"  - [{where}] {e.kind}: {e.message}")
        if self.cancelled:
            lines.append("- Run stopped early (cancelled or deadline reached)")
        return "\n".join(lines) + "\n"

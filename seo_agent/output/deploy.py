from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Sequence


class DeployFailed(Exception):
    """A rollout to one target did not go through."""


@dataclass(slots=True)
class DeployResult:
    success: bool
    log: List[str] = field(default_factory=list)


class Deployer(ABC):
    """Capability to rebuild the sites after new content lands.

    The agent only cares whether it worked; transport and credentials belong
    to the implementation.
    """

    @abstractmethod
    def deploy(self, targets: Sequence[str]) -> DeployResult:
        """Redeploy every target and report per-target log lines."""

"""Outbound collaborators: deployment, report artifacts and the run report."""

from .deploy import DeployFailed, DeployResult, Deployer
from .github_client import GitHubDeployer
from .pipeline_reporter import RunError, RunReport, RunState, StageResult
from .report_sink import FileReportSink, ReportSink

__all__ = [
    "DeployFailed",
    "DeployResult",
    "Deployer",
    "GitHubDeployer",
    "RunError",
    "RunReport",
    "RunState",
    "StageResult",
    "FileReportSink",
    "ReportSink",
]

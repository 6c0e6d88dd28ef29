from unittest.mock import MagicMock

import pytest
from github import GithubException

from seo_agent.output import GitHubDeployer


def _client(dispatch_ok=True, error=None):
    client = MagicMock()
    workflow = MagicMock()
    workflow.create_dispatch.return_value = dispatch_ok
    repo = MagicMock()
    repo.get_workflow.return_value = workflow
    if error is not None:
        client.get_repo.side_effect = error
    else:
        client.get_repo.return_value = repo
    return client, repo, workflow


def test_missing_token_fails_at_deploy_time(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_API_KEY", raising=False)
    deployer = GitHubDeployer()

    result = deployer.deploy(["org/site-a"])

    assert not result.success
    assert "GITHUB_TOKEN" in result.log[0]
    assert GitHubDeployer().deploy([]).success
    assert GitHubDeployer(dry_run=True).deploy(["org/site-a"]).success


def test_dry_run_only_logs():
    client, _, _ = _client()
    deployer = GitHubDeployer(dry_run=True, client=client, workflow="deploy.yml", ref="main")

    result = deployer.deploy(["org/site-a", "org/site-b"])

    assert result.success
    assert result.log == [
        "[DRY-RUN] org/site-a: would dispatch deploy.yml@main",
        "[DRY-RUN] org/site-b: would dispatch deploy.yml@main",
    ]
    client.get_repo.assert_not_called()


def test_no_targets_is_a_successful_noop():
    client, _, _ = _client()
    assert GitHubDeployer(client=client).deploy([]).success
    client.get_repo.assert_not_called()


def test_dispatches_workflow_per_target():
    client, repo, workflow = _client()
    deployer = GitHubDeployer(client=client, workflow="rebuild.yml", ref="prod", sleep=lambda s: None)

    result = deployer.deploy(["org/site-a", "org/site-b"])

    assert result.success
    assert [c.args[0] for c in client.get_repo.call_args_list] == ["org/site-a", "org/site-b"]
    repo.get_workflow.assert_called_with("rebuild.yml")
    workflow.create_dispatch.assert_called_with("prod")
    assert result.log[0] == "org/site-a: dispatched rebuild.yml@prod"


def test_not_found_fails_that_target_without_retry():
    client, _, _ = _client(error=GithubException(404, {"message": "Not Found"}, None))
    sleeps = []
    deployer = GitHubDeployer(client=client, sleep=sleeps.append)

    result = deployer.deploy(["org/missing"])

    assert not result.success
    assert "FAILED" in result.log[0]
    assert client.get_repo.call_count == 1
    assert sleeps == []


def test_server_errors_are_retried_with_backoff():
    client, _, _ = _client(error=GithubException(502, {"message": "Bad Gateway"}, None))
    sleeps = []
    deployer = GitHubDeployer(client=client, sleep=sleeps.append)

    result = deployer.deploy(["org/site-a"])

    assert not result.success
    assert client.get_repo.call_count == 4
    # no pause after the final attempt
    assert sleeps == [1.0, 1.5, 2.25]


def test_rejected_dispatch_is_a_failure():
    client, _, _ = _client(dispatch_ok=False)
    result = GitHubDeployer(client=client, sleep=lambda s: None).deploy(["org/site-a"])
    assert not result.success

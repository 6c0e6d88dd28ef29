import json
import logging

import pytest

from seo_agent.main import main, parse_args
from seo_agent.models import Identity, Site
from seo_agent.storage import JsonFileStore
from seo_agent.utils.logging import JsonLineFormatter, StepTimer, log_event


@pytest.fixture(autouse=True)
def quiet_env(monkeypatch):
    monkeypatch.setenv("LOG_OUTPUT", "stdout")
    for name in (
        "SEO_MIN_ARTICLES",
        "SEO_MAX_ARTICLES",
        "SEO_RUN_DEADLINE",
        "SEO_STORE_PATH",
        "SEO_REPORT_DIR",
        "SEO_DEPLOY_TARGETS",
    ):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_parse_args_defaults():
    args = parse_args([])
    assert (args.command, args.count) == ("full", 10)
    assert parse_args(["generate", "3"]).count == 3


def test_bad_config_exits_nonzero(tmp_path):
    assert main(["analyze", "--config", str(tmp_path / "missing.yaml")]) == 1


def test_generate_command_writes_posts_and_report(tmp_path):
    store_path = tmp_path / "store.json"
    store = JsonFileStore(store_path)
    store.add_site(Site(id="a", name="SiteA"))
    store.add_user(Identity(id="u-1", name="admin"))
    report_dir = tmp_path / "reports"

    code = main(["generate", "2", "--store", str(store_path), "--report-dir", str(report_dir)])

    assert code == 0
    posts = json.loads(store_path.read_text(encoding="utf-8"))["posts"]
    assert 1 <= len(posts) <= 2
    assert all(p["status"] == "PUBLISHED" for p in posts)
    run_files = list(report_dir.glob("run-*.json"))
    assert len(run_files) == 1
    assert json.loads(run_files[0].read_text(encoding="utf-8"))["state"] == "done"


def test_full_run_without_github_token_still_publishes(tmp_path, monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_API_KEY", raising=False)
    monkeypatch.setenv("SEO_MIN_ARTICLES", "2")
    monkeypatch.setenv("SEO_MAX_ARTICLES", "2")
    monkeypatch.setenv("SEO_DEPLOY_TARGETS", "org/site-a")
    config_path = tmp_path / "competitors.yaml"
    config_path.write_text("competitors: []\n", encoding="utf-8")
    store_path = tmp_path / "store.json"
    store = JsonFileStore(store_path)
    store.add_site(Site(id="a", name="SiteA"))
    store.add_user(Identity(id="u-1", name="admin"))
    report_dir = tmp_path / "reports"

    code = main(
        ["full", "--config", str(config_path), "--store", str(store_path), "--report-dir", str(report_dir)]
    )

    assert code == 0
    assert json.loads(store_path.read_text(encoding="utf-8"))["posts"]
    saved = json.loads(next(report_dir.glob("run-*.json")).read_text(encoding="utf-8"))
    assert saved["state"] == "done"
    assert (saved["deploy"]["attempted"], saved["deploy"]["success"]) == (True, False)
    assert [e["kind"] for e in saved["errors"]] == ["DeployFailed"]


def test_generate_without_sites_exits_nonzero(tmp_path):
    code = main(["generate", "--store", str(tmp_path / "empty.json"), "--report-dir", str(tmp_path)])
    assert code == 1


def test_log_event_emits_json(caplog):
    logger = logging.getLogger("seo.test")
    with caplog.at_level(logging.INFO, logger="seo.test"):
        log_event(logger, logging.INFO, "site_done", site="SiteA", created=3)
    assert json.loads(caplog.records[-1].getMessage()) == {"created": 3, "event": "site_done", "site": "SiteA"}


def test_json_formatter_and_step_timer(caplog):
    logger = logging.getLogger("seo.test")
    with caplog.at_level(logging.INFO, logger="seo.test"):
        with StepTimer("generate", logger) as timer:
            pass
    assert timer.elapsed >= 0
    line = JsonLineFormatter().format(caplog.records[-1])
    assert json.loads(line)["message"].startswith("Stage 'generate' finished")

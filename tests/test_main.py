"""Tests for the command line entry point."""

import asyncio
import json
import logging

import pytest

import main

from conftest import make_violation


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "history:\n"
        f"  storage_dir: {tmp_path / 'history'}\n"
        "coverage:\n"
        "  total_components: 4\n"
        "output:\n"
        f"  reports_dir: {tmp_path / 'reports'}\n"
        "logging:\n"
        "  level: WARNING\n"
        "  file: null\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def results_file(tmp_path):
    path = tmp_path / "axe.json"
    path.write_text(json.dumps({
        "violations": [
            make_violation("critical", tags=("label",), html='<input class="SearchBar">'),
            make_violation("minor", html='<div class="PlayerCard"></div>'),
        ]
    }), encoding="utf-8")
    return path


class TestProcessCommand:
    def test_process_stores_and_exports(self, tmp_path, config_file, results_file):
        asyncio.run(main.main(["--config", str(config_file), "process", str(results_file), "--html"]))

        history = json.loads((tmp_path / "history" / "accessibility-metrics-history.json").read_text(encoding="utf-8"))
        assert len(history) == 1
        assert history[0]["testCoverage"]["testedComponents"] == 2

        reports = tmp_path / "reports"
        json_reports = list(reports.glob("report-*.json"))
        assert len(json_reports) == 1
        assert len(list(reports.glob("report-*.html"))) == 1
        report = json.loads(json_reports[0].read_text(encoding="utf-8"))
        assert report["summary"]["keyIssues"][0] == "1 critical accessibility violations"

    def test_no_store(self, tmp_path, config_file, results_file):
        asyncio.run(main.main(["--config", str(config_file), "process", str(results_file), "--no-store"]))
        assert not (tmp_path / "history" / "accessibility-metrics-history.json").exists()

    def test_bare_violation_list(self, tmp_path):
        path = tmp_path / "violations.json"
        path.write_text(json.dumps([make_violation()]), encoding="utf-8")
        assert len(main.load_results_file(str(path))["violations"]) == 1

    def test_missing_results_file_exits(self, tmp_path, config_file):
        with pytest.raises(SystemExit) as excinfo:
            asyncio.run(main.main(["--config", str(config_file), "process", str(tmp_path / "nope.json")]))
        assert excinfo.value.code == 1


class TestQueryCommands:
    def test_history_and_trends(self, config_file, results_file, capsys):
        asyncio.run(main.main(["--config", str(config_file), "process", str(results_file)]))
        capsys.readouterr()

        asyncio.run(main.main(["--config", str(config_file), "history"]))
        history = json.loads(capsys.readouterr().out)
        assert history[0]["totalViolations"] == 2

        asyncio.run(main.main(["--config", str(config_file), "trends", "--days", "7"]))
        trends = json.loads(capsys.readouterr().out)
        assert trends[0]["critical"] == 1
        assert trends[0]["total"] == 2

        asyncio.run(main.main(["--config", str(config_file), "trends", "--component", "SearchBar"]))
        component_trends = json.loads(capsys.readouterr().out)
        assert component_trends[0]["total"] == 1

"""
RESULTS & CLI TESTS - Output files, summary, progress rendering and an
end-to-end run with the HTTP layer mocked out.
"""

import io
import json
import logging
from unittest.mock import Mock

import pytest
import requests
from rich.console import Console

from sitemap_checker import main as main_module
from sitemap_checker.progress import ConsoleProgressReporter, ProgressUpdate
from sitemap_checker.results import print_summary, save_results
from sitemap_checker.status_store import StatusRecord

SITEMAP_URL = "https://site.test/sitemap.xml"
SITEMAP_XML = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
    <url><loc>https://a.test/</loc></url>
    <url><loc>https://b.test/</loc></url>
</urlset>"""

# =============================================================================
# 1. OUTPUT FILES
# =============================================================================

def test_save_results_writes_pretty_json(tmp_path):
    a, b = StatusRecord("https://a.test/", 200), StatusRecord("https://b.test/", 404)

    paths = save_results([a, b], [b], str(tmp_path / "non200.json"), str(tmp_path / "out" / "all.json"))

    all_text = (tmp_path / "out" / "all.json").read_text()
    assert json.loads(all_text) == [
        {"url": "https://a.test/", "status": 200},
        {"url": "https://b.test/", "status": 404},
    ]
    assert '\n  {\n    "url": "https://a.test/"' in all_text
    assert json.loads((tmp_path / "non200.json").read_text()) == [{"url": "https://b.test/", "status": 404}]
    assert paths["all_file"].endswith("all.json")


def test_print_summary(capsys):
    print_summary({200: 3, 404: 1}, [StatusRecord("https://b.test/", 404)], SITEMAP_URL)

    out = capsys.readouterr().out
    assert "200: 3 (75.0%)" in out
    assert "404  https://b.test/" in out

# =============================================================================
# 2. PROGRESS RENDERING
# =============================================================================

def test_console_reporter_renders_all_sections():
    stream = io.StringIO()
    reporter = ConsoleProgressReporter(console=Console(file=stream, width=200))

    # Brackets in URLs must come out as text, not rich markup
    reporter.report(ProgressUpdate(
        processed=1,
        total=4,
        url="https://b.test/?page[1]=x",
        status=404,
        status_counts={404: 1},
        upcoming=["https://c.test/"],
        non_200=[StatusRecord("https://b.test/?page[1]=x", 404)],
    ))
    reporter.flush()

    out = stream.getvalue()
    assert "25.00%" in out
    assert "Status Codes" in out
    assert "URLs in Queue" in out and "https://c.test/" in out
    assert "Non-200 URLs" in out
    assert out.count("https://b.test/?page[1]=x") == 2
    assert reporter.last_update.processed == 1

# =============================================================================
# 3. END-TO-END CLI
# =============================================================================

@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def fake_http(monkeypatch):
    responses = {
        SITEMAP_URL: Mock(status_code=200, text=SITEMAP_XML),
        "https://a.test/": Mock(status_code=200),
        "https://b.test/": Mock(status_code=404),
    }

    def get(self, url, timeout=None, **kwargs):
        if url not in responses:
            raise requests.exceptions.ConnectionError(f"no route to {url}")
        return responses[url]

    monkeypatch.setattr(requests.Session, "get", get)
    return responses


def test_cli_run_saves_results(tmp_path, monkeypatch, fake_http):
    monkeypatch.chdir(tmp_path)

    exit_code = main_module.main([
        "--sitemap-url", SITEMAP_URL,
        "--concurrency", "1",
        "--delay", "300",
        "--order", "sequential",
        "--reporter", "log",
        "--save",
        "--non200-file", "non200.json",
        "--all-file", "all.json",
    ])

    assert exit_code == 0
    assert json.loads((tmp_path / "all.json").read_text()) == [
        {"url": "https://a.test/", "status": 200},
        {"url": "https://b.test/", "status": 404},
    ]
    assert json.loads((tmp_path / "non200.json").read_text()) == [
        {"url": "https://b.test/", "status": 404},
    ]


def test_cli_sitemap_failure_exits_1(tmp_path, monkeypatch, fake_http, capsys):
    monkeypatch.chdir(tmp_path)

    exit_code = main_module.main([
        "--sitemap-url", "https://missing.test/sitemap.xml",
        "-c", "2", "-d", "300", "-o", "random", "--reporter", "log", "--no-save",
    ])

    assert exit_code == 1
    assert "Exiting..." in capsys.readouterr().out
    assert not (tmp_path / "parsed-urls.json").exists()


def test_cli_prompts_for_missing_values(tmp_path, monkeypatch, fake_http):
    monkeypatch.chdir(tmp_path)
    answers = iter([SITEMAP_URL, "2", "300", "", "n"])

    exit_code = main_module.run(["--reporter", "log"], input_func=lambda prompt: next(answers))

    assert exit_code == 0
    assert not (tmp_path / "parsed-urls.json").exists()

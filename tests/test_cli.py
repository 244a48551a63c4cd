"""Tests for the typer CLI (demo mode, local word list)."""

import json

import pytest
from typer.testing import CliRunner

from snapcards.ai.base import AIAdapter
from snapcards.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(tmp_path, monkeypatch):
    """Isolated data dir, no remote store, no simulated latency."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SNAPCARDS_DATA_DIR", str(tmp_path / "data"))
    for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_EMAIL", "SUPABASE_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("DASHSCOPE_API_KEY", raising=False)
    monkeypatch.delenv("SNAPCARDS_FALLBACK_API_KEY", raising=False)
    monkeypatch.setattr(AIAdapter, "simulate_latency", lambda self: None)
    return tmp_path / "data"


def invoke(*args):
    return runner.invoke(app, list(args))


class TestAddAndList:
    def test_add_words(self, cli_env):
        result = invoke("add", "apple", "zephyr")

        assert result.exit_code == 0, result.output
        assert "+ Apple  苹果" in result.output
        assert "+ zephyr" in result.output
        saved = json.loads((cli_env / "words.json").read_text(encoding="utf-8"))
        assert [c["word"] for c in saved] == ["zephyr", "Apple"]

    def test_add_duplicate_reports_skip(self):
        invoke("add", "apple")
        result = invoke("add", "APPLE")

        assert result.exit_code == 0
        assert "already in list" in result.output
        assert "No words were added." in result.output

    def test_list(self):
        invoke("add", "apple", "book")

        result = invoke("list")

        assert result.exit_code == 0
        lines = result.output.splitlines()
        book = next(i for i, line in enumerate(lines) if line.startswith("Book"))
        apple = next(i for i, line in enumerate(lines) if line.startswith("Apple"))
        assert book < apple
        assert "苹果" in lines[apple]

    def test_list_empty(self):
        assert "Word list is empty." in invoke("list").output

    def test_show(self):
        invoke("add", "apple")
        result = invoke("show", "apple")
        assert "I eat an apple every day." in result.output


class TestMutations:
    def test_status(self):
        invoke("add", "apple")

        result = invoke("status", "apple", "mastered")

        assert result.exit_code == 0
        assert "new -> mastered" in result.output
        assert "mastered" in invoke("list", "--status", "mastered").output

    def test_invalid_status(self):
        invoke("add", "apple")
        assert invoke("status", "apple", "learned").exit_code == 2

    def test_remove(self):
        invoke("add", "apple", "book")

        assert invoke("remove", "apple").exit_code == 0

        assert "Apple" not in invoke("list").output

    def test_remove_unknown_word(self):
        assert invoke("remove", "ghost").exit_code == 1

    def test_clear(self):
        invoke("add", "apple", "book")

        result = invoke("clear", "--yes")

        assert result.exit_code == 0
        assert "Word list is empty." in invoke("list").output

    def test_stats(self):
        invoke("add", "apple", "book")
        invoke("status", "book", "review")

        output = invoke("stats").output

        assert "review    1" in output
        assert "total     2" in output


class TestScanExportConfig:
    def test_scan_demo(self, tmp_path):
        image = tmp_path / "photo.jpg"
        image.write_bytes(b"jpeg")

        result = invoke("scan", str(image))

        assert result.exit_code == 0
        assert "Recognized: apple, book, adventure, galaxy, silence" in result.output

    def test_scan_add_selected(self, tmp_path):
        image = tmp_path / "photo.jpg"
        image.write_bytes(b"jpeg")

        result = invoke("scan", str(image), "--add", "-s", "book")

        assert result.exit_code == 0
        assert "+ Book  书" in result.output
        assert "Apple" not in invoke("list").output

    def test_export(self, tmp_path):
        invoke("add", "apple")
        output = tmp_path / "anki.csv"

        result = invoke("export", str(output))

        assert result.exit_code == 0
        assert "Exported 1 cards" in result.output
        assert output.read_text(encoding="utf-8").startswith("front,back,example,tags")

    def test_config_persists(self, cli_env):
        result = invoke("config", "--live", "--api-key", "sk-abcdefghijklmnop")

        assert result.exit_code == 0
        assert "Demo mode: off" in result.output
        assert "sk-ab...mnop" in result.output
        settings = json.loads((cli_env / "settings.json").read_text(encoding="utf-8"))
        assert settings == {"apiKey": "sk-abcdefghijklmnop", "isDemoMode": False}

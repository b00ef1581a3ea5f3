from __future__ import annotations

import json
import logging
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recipe_catalog import create_app
from recipe_catalog.config import Settings
from recipe_catalog.request_log import REQUEST_LOGGER_NAME


def test_requests_are_appended_as_json_lines(tmp_path):
    log_path = tmp_path / "logs" / "requests.log"
    settings = Settings(data_dir=tmp_path / "data", request_log_path=log_path)
    client = create_app(settings=settings).test_client()

    client.get("/api/recipes?category=Pasta", headers={"User-Agent": "pytest"})
    client.get("/api/recipes/404")

    entries = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [entry["statusCode"] for entry in entries] == [200, 404]
    assert entries[0]["method"] == "GET"
    assert entries[0]["url"] == "/api/recipes?category=Pasta"
    assert entries[0]["userAgent"] == "pytest"
    assert entries[0]["duration"].endswith("ms")


def test_requests_are_logged_to_console_logger(tmp_path, caplog):
    settings = Settings(data_dir=tmp_path, request_log_path=None)
    client = create_app(settings=settings).test_client()

    with caplog.at_level(logging.INFO, logger=REQUEST_LOGGER_NAME):
        client.get("/api/recipes/categories")

    messages = [r.getMessage() for r in caplog.records if r.name == REQUEST_LOGGER_NAME]
    assert any("GET /api/recipes/categories 200" in message for message in messages)
    assert not (tmp_path / "logs").exists()


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("RECIPES_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("REQUEST_LOG_PATH", "")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.data_dir == tmp_path
    assert settings.request_log_path is None
    assert settings.log_level == "DEBUG"

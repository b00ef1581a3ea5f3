"""Per-request access logging.

Each finished request is written as a one-line summary to the
``recipe_catalog.requests`` logger and, when a request log path is configured,
appended as a JSON object to that file (one object per line).
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional

from flask import Flask, Response, g, request

from .models import utc_timestamp

REQUEST_LOGGER_NAME = "recipe_catalog.requests"


def init_request_logging(app: Flask, log_path: Optional[Path]) -> None:
    logger = logging.getLogger(REQUEST_LOGGER_NAME)

    @app.before_request
    def _start_timer() -> None:
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response: Response) -> Response:
        started = g.pop("request_started", None)
        duration_ms = round((time.perf_counter() - started) * 1000) if started is not None else 0
        entry = {
            "timestamp": utc_timestamp(),
            "method": request.method,
            "url": request.full_path.rstrip("?"),
            "statusCode": response.status_code,
            "duration": f"{duration_ms}ms",
            "ip": request.remote_addr,
            "userAgent": request.headers.get("User-Agent"),
        }

        logger.info(
            "%s %s %s %s - %sms",
            entry["timestamp"],
            entry["method"],
            entry["url"],
            entry["statusCode"],
            duration_ms,
        )
        if log_path is not None:
            _append_entry(log_path, entry)
        return response


def _append_entry(log_path: Path, entry: dict) -> None:
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with log_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(entry, ensure_ascii=False) + "\n")
    except OSError as exc:
        # A broken access log must not fail the request it describes.
        logging.getLogger(REQUEST_LOGGER_NAME).warning(
            "Could not write request log %s: %s", log_path, exc
        )


__all__ = ["REQUEST_LOGGER_NAME", "init_request_logging"]

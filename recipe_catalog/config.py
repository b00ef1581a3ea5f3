from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """Runtime configuration passed explicitly to the store and the request log."""

    data_dir: Path = Path("data")
    request_log_path: Optional[Path] = Path("logs/requests.log")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""

        data_dir = Path(os.environ.get("RECIPES_DATA_DIR", "data"))
        log_path = os.environ.get("REQUEST_LOG_PATH", "logs/requests.log")
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
        return cls(
            data_dir=data_dir,
            request_log_path=Path(log_path) if log_path else None,
            log_level=log_level,
        )


__all__ = ["Settings"]

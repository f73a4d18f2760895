"""
Basic settings and logging configuration for the protankr load planner.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path


def _get_resource_root() -> Path:

    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        return Path(sys._MEIPASS)
    return Path(__file__).resolve().parents[2]


def _get_user_data_dir(resource_root: Path) -> Path:

    if getattr(sys, "frozen", False):
        exe_path = Path(getattr(sys, "executable", resource_root))
        return exe_path.parent / "protankr_app_data"
    return resource_root / "protankr_app_data"


@dataclass(slots=True)
class Settings:
    """Application-level settings."""

    project_root: Path
    data_dir: Path
    log_path: Path

    @classmethod
    def default(cls) -> "Settings":
        resource_root = _get_resource_root()
        data_dir = _get_user_data_dir(resource_root)
        data_dir.mkdir(exist_ok=True)
        return cls(
            project_root=resource_root,
            data_dir=data_dir,
            log_path=data_dir / "protankr.log",
        )


def init_logging(settings: Settings, console: bool = False, level: int = logging.INFO) -> None:
    """Configure basic logging to the data-dir log file and optionally stderr."""
    handlers: list[logging.Handler] = [
        logging.FileHandler(settings.log_path, encoding="utf-8"),
    ]
    if console:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=handlers,
    )

    logging.getLogger(__name__).info("Logging initialized. Log file at %s", settings.log_path)

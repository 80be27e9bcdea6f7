"""Centralised configuration loaded from environment variables and dotenv."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Paths ──────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[2]
DATA_DIR: Path = Path(os.getenv("XSKILLS_DATA_DIR", str(PROJECT_ROOT / "data")))

# ── X API ──────────────────────────────────────────────────────────────────
X_BEARER_TOKEN: str = os.getenv("X_BEARER_TOKEN", "")
DEFAULT_COUNT: int = int(os.getenv("XSKILLS_DEFAULT_COUNT", "100"))
MAX_BOOKMARKS: int = int(os.getenv("XSKILLS_MAX_BOOKMARKS", "800"))

# ── Clustering ─────────────────────────────────────────────────────────────
MIN_CLUSTER_SIZE: int = int(os.getenv("XSKILLS_MIN_CLUSTER_SIZE", "3"))


def data_paths(data_dir: Path | None = None) -> dict[str, Path]:
    """Return resolved paths under the data directory.

    Keys: ``data_dir``, ``db``, ``manager``.
    """
    base = data_dir or DATA_DIR
    return {
        "data_dir": base,
        "db": base / "xskills.sqlite3",
        "manager": base / "skill-manager.yml",
    }

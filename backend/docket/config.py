"""
Configuration - environment-driven settings for the Docket backend
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent.parent

# Used when no host app id is injected
DEFAULT_APP_ID = "local-dev-app-id"


def get_scenarios_dir() -> Path:
    """Directory holding one folder per scenario"""
    return Path(os.getenv("DOCKET_SCENARIOS_DIR", PROJECT_ROOT / "scenarios"))


def get_default_scenario() -> str:
    return os.getenv("DOCKET_DEFAULT_SCENARIO", "bail-hearing")


def get_app_id() -> str:
    """App id stamped on every persisted history entry"""
    return os.getenv("DOCKET_APP_ID", DEFAULT_APP_ID)


def get_history_dir() -> Path:
    return Path(os.getenv("DOCKET_HISTORY_DIR", PROJECT_ROOT / "logs" / "history"))


def get_history_backend() -> str:
    """Configured history recorder: "jsonl" (default) or "memory" """
    return os.getenv("DOCKET_HISTORY_BACKEND", "jsonl").lower()


def get_random_seed() -> int | None:
    """Seed for case selection; None leaves the random source unseeded"""
    raw = os.getenv("DOCKET_RANDOM_SEED")
    if raw is None or raw.strip() == "":
        return None
    return int(raw)

"""Configuration for the budget tracker.

Paths, display defaults and engine thresholds live here, with
environment variable overrides for the paths and display settings.
"""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("BUDGET_DATA_DIR", _PROJECT_ROOT / "data"))
STORE_PATH = Path(os.getenv("BUDGET_STORE_PATH", DATA_DIR / "store.json"))
SEED_PATH = DATA_DIR / "seed.json"

CURRENCY_SYMBOL = os.getenv("BUDGET_CURRENCY_SYMBOL", "₹")
LOG_LEVEL = os.getenv("BUDGET_LOG_LEVEL", "INFO").upper()

# storage keys, one JSON array each
TRANSACTIONS_KEY = "personal-finance-transactions"
BUDGETS_KEY = "personal-finance-budgets"

TREND_WINDOW_MONTHS = 6
DESCRIPTION_MAX_LENGTH = 100

# percent of a budget spent
WARNING_THRESHOLD = 80
OVER_THRESHOLD = 100

# percent change against the previous month
TREND_CHANGE_THRESHOLD = 10

# percent of income saved
LOW_SAVINGS_RATE = 10
GREAT_SAVINGS_RATE = 20

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "default": {
            "class": "rich.logging.RichHandler",
            "formatter": "default",
            "rich_tracebacks": True,
            "show_time": True,
            "show_path": False,
            "log_time_format": "%Y-%m-%d %H:%M:%S",
        },
    },
    "loggers": {
        "budgetcore": {
            "handlers": ["default"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "app": {
            "handlers": ["default"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}


def configure_logging() -> None:
    """Install the rich console handler for the package loggers."""
    logging.config.dictConfig(LOGGING_CONFIG)


def ensure_data_directories() -> None:
    """Create the data directory and the store's parent if missing."""
    for directory in (DATA_DIR, STORE_PATH.parent):
        directory.mkdir(parents=True, exist_ok=True)

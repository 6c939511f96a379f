from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from coinex.config import get_settings  # noqa: E402


@pytest.fixture()
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

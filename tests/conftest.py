from __future__ import annotations

from pathlib import Path

import pytest

from usageview import database as database_module
from usageview.core.settings import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    for name in ("USAGEVIEW_URL", "USAGEVIEW_SHORTLINK_API", "USAGEVIEW_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("USAGEVIEW_DB_PATH", str(tmp_path / "shortlinks.db"))
    get_settings.cache_clear()
    try:
        yield
    finally:
        get_settings.cache_clear()


@pytest.fixture()
def database():
    database_module.reset_state()
    try:
        yield database_module
    finally:
        database_module.reset_state()

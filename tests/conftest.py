"""Pytest configuration and fixtures"""

from pathlib import Path
from typing import Generator

import pytest

from bitperm.core.config import Settings, reset_settings
from bitperm.core.permissions import (PermissionEngine, PermissionPolicy,
                                      PermissionRegistry, Role, Subject,
                                      default_registry)
from bitperm.core.permissions.engine import get_engine
from bitperm.infrastructure.logging import setup_logging


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Route engine logs through the real processor chain at debug level"""
    setup_logging(Settings(log_level="DEBUG", log_format="console"))


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch) -> Generator[None, None, None]:
    """Isolate tests from BITPERM_* variables and cached settings"""
    monkeypatch.delenv("BITPERM_REGISTRY_FILE", raising=False)
    monkeypatch.delenv("BITPERM_ENVIRONMENT", raising=False)
    monkeypatch.delenv("BITPERM_MAX_PERMISSION_BITS", raising=False)
    reset_settings()
    get_engine.cache_clear()
    yield
    reset_settings()
    get_engine.cache_clear()


@pytest.fixture
def registry() -> PermissionRegistry:
    """The built-in permission registry"""
    return default_registry()


@pytest.fixture
def engine(registry: PermissionRegistry) -> PermissionEngine:
    """Engine over the built-in registry"""
    return PermissionEngine(registry)


@pytest.fixture
def policy(engine: PermissionEngine) -> PermissionPolicy:
    """Admin policy over the built-in registry"""
    return PermissionPolicy(engine)


@pytest.fixture
def admin() -> Subject:
    """A subject holding ADMINISTRATOR directly"""
    return Subject(id="1", tag="admin", permissions="1")


@pytest.fixture
def moderator() -> Subject:
    """A subject holding MANAGE_USERS and MANAGE_USER_ROLES"""
    return Subject(id="2", tag="moderator", permissions=str(0b1010))


@pytest.fixture
def regular_user() -> Subject:
    """A subject with no permissions of its own"""
    return Subject(id="3", tag="regular", permissions="0")


@pytest.fixture
def premium_role() -> Role:
    """Role granting the profile privacy permissions"""
    return Role(id="premium", name="Premium", permissions=str(0b110000))


@pytest.fixture
def registry_file(tmp_path: Path) -> Path:
    """A small YAML registry on disk"""
    path = tmp_path / "permissions.yml"
    path.write_text(
        "permissions:\n"
        "  - name: ADMINISTRATOR\n"
        "    bit: 0\n"
        "  - name: READ\n"
        "    bit: 1\n"
        "    description: Read content\n"
        "  - name: WRITE\n"
        "    bit: 2\n"
        "    depends_on: [READ]\n"
        "  - name: DELETE\n"
        "    bit: 70\n"
        "    depends_on: [READ, WRITE]\n"
    )
    return path

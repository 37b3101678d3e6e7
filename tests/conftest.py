"""Shared test fixtures for reticule.

Provides an isolated home directory, in-memory and on-disk repositories,
sample profiles, output state management and a CLI runner. These fixtures
are discovered by pytest and available to all test modules without
explicit imports.
"""

from __future__ import annotations

from pathlib import Path, PurePath

import pytest

from reticule.config import ConfigRepository
from reticule.models import ConfigSet, Credentials, Profile
from reticule.output import reset_output
from reticule.storage import FileStorage, MemoryStorage


MEMORY_CONFIG_PATH = PurePath("/home/trader/.reticule/reticule")


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


def make_profile(
    key: str = "key-1",
    passphrase: str = "pass-1",
    secret: str = "secret-1",
    base_url: str = "https://api-public.sandbox.pro.coinbase.com",
    port: int = 80,
) -> Profile:
    return Profile(
        base_url=base_url,
        feed_url="wss://ws-feed-public.sandbox.pro.coinbase.com",
        auth=Credentials(key=key, passphrase=passphrase, secret=secret),
        server_ip="127.0.0.1",
        server_port=port,
        server_secret="default",
    )


@pytest.fixture
def profile_factory():
    """Return :func:`make_profile` for tests that need several distinct profiles."""
    return make_profile


@pytest.fixture
def sample_profile() -> Profile:
    """A fully populated sandbox profile."""
    return make_profile()


@pytest.fixture
def two_profiles() -> ConfigSet:
    """A config set with ``alice`` (current) and ``bob``."""
    return ConfigSet(
        current="alice",
        profiles={
            "alice": make_profile(key="alice-key", passphrase="alice-pass", secret="alice-secret"),
            "bob": make_profile(
                key="bob-key",
                passphrase="bob-pass",
                secret="bob-secret",
                base_url="https://api.pro.coinbase.com",
                port=8080,
            ),
        },
    )


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """An empty in-memory filesystem."""
    return MemoryStorage()


@pytest.fixture
def memory_repo(memory_storage: MemoryStorage) -> ConfigRepository:
    """A repository for :data:`MEMORY_CONFIG_PATH` backed by :func:`memory_storage`."""
    return ConfigRepository(MEMORY_CONFIG_PATH, storage=memory_storage)


@pytest.fixture
def seed():
    """Return a helper that writes a config set through a repository, creating the file."""

    def _seed(repo: ConfigRepository, config_set: ConfigSet) -> None:
        repo.ensure_parent()
        repo.save(config_set, create=True)

    return _seed


# ---------------------------------------------------------------------------
# Home isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``Path.home()`` at a temporary directory.

    Returns:
        The temporary home directory. The config file resolves to
        ``<home>/.reticule/reticule``.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("NO_COLOR", raising=False)
    return home


@pytest.fixture
def disk_repo(isolated_home: Path) -> ConfigRepository:
    """A repository for the real default path inside :func:`isolated_home`."""
    return ConfigRepository(storage=FileStorage())


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()

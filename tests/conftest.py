"""
Pytest configuration and shared fixtures for the proclabel test suite.

This module provides fake OS lookups that count their calls, a controllable
clock, and engine fixtures wired to both.
"""

import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from proclabel.identification import IdentificationEngine  # noqa: E402
from proclabel.models import IdentifierConfig  # noqa: E402
from proclabel.system.lookups import ContainerLookup, CwdLookup  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Fakes
# ============================================================================


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCwdLookup(CwdLookup):
    """Answers from a pid -> cwd map in lsof field format."""

    def __init__(self, cwds: Optional[Dict[int, str]] = None):
        self.cwds: Dict[int, str] = dict(cwds or {})
        self.error: Optional[Exception] = None
        self.delay = 0.0
        self.calls: List[List[int]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def query_cwds(self, pids: Sequence[int]) -> str:
        self.calls.append(list(pids))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return "".join(f"p{pid}\nfcwd\nn{self.cwds[pid]}\n" for pid in pids if pid in self.cwds)


class FakeContainerLookup(ContainerLookup):
    """Answers with fixed ``name|image|ports`` lines."""

    def __init__(self, lines: Optional[List[str]] = None):
        self.lines: List[str] = list(lines or [])
        self.error: Optional[Exception] = None
        self.delay = 0.0
        self.call_count = 0

    async def list_containers(self) -> str:
        self.call_count += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return "\n".join(self.lines)


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def fake_clock():
    """Clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def cwd_lookup():
    """Working-directory lookup that knows no pids until told."""
    return FakeCwdLookup()


@pytest.fixture
def container_lookup():
    """Container lookup with no running containers until told."""
    return FakeContainerLookup()


@pytest.fixture
def identifier_config():
    """Default identification settings."""
    return IdentifierConfig()


@pytest.fixture
def engine(identifier_config, cwd_lookup, container_lookup, fake_clock):
    """Identification engine wired to the fakes and the fake clock."""
    return IdentificationEngine(
        identifier_config,
        cwd_lookup=cwd_lookup,
        container_lookup=container_lookup,
        clock=fake_clock,
    )


@pytest.fixture
def sample_config_data():
    """Sample raw configuration data, as parsed from config.toml."""
    return {
        "identifier": {
            "cache": {
                "max_entries": 500,
                "ttl_seconds": 5.0,
                "key_command_prefix": 64,
            },
            "resolvers": {
                "cwd_cache_ttl_seconds": 20.0,
                "cwd_cache_max_entries": 2048,
                "container_cache_ttl_seconds": 15.0,
                "command_timeout_seconds": 2.0,
                "lsof_command": "/usr/sbin/lsof",
                "docker_command": "docker",
            },
        },
        "monitor": {
            "refresh_interval_seconds": 1.0,
            "log_level": "debug",
            "listening_only": False,
        },
    }

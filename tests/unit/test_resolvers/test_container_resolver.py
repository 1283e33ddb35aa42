"""
Unit tests for container lookup by published port.
"""

import pytest

from proclabel.models import ContainerInfo
from proclabel.resolvers import ContainerPortResolver
from proclabel.resolvers.containers import match_ports, parse_container_listing
from proclabel.validation import ToolExecutionError, ToolUnavailableError

DOCKER_PS_OUTPUT = "\n".join(
    [
        "db|postgres:16|0.0.0.0:5432->5432/tcp, :::5432->5432/tcp",
        "cache|redis:7|0.0.0.0:6379->6379/tcp",
        "worker|myorg/worker:latest|",
    ]
)


@pytest.mark.unit
class TestContainerListingParsing:
    """Test cases for parsing and matching the container listing."""

    def test_parse_listing(self):
        containers = parse_container_listing(DOCKER_PS_OUTPUT)

        assert [info for info, _ in containers] == [
            ContainerInfo(name="db", image="postgres:16"),
            ContainerInfo(name="cache", image="redis:7"),
            ContainerInfo(name="worker", image="myorg/worker:latest"),
        ]
        assert containers[2][1] == ""

    def test_short_lines_are_skipped(self):
        """Test that lines with fewer than two fields are ignored."""
        containers = parse_container_listing("garbage\n\n|image|ports\nweb|nginx|0.0.0.0:80->80/tcp")

        assert [info.name for info, _ in containers] == ["web"]

    def test_match_ports(self):
        containers = parse_container_listing(DOCKER_PS_OUTPUT)

        matched = match_ports(containers, [5432, 6379, 3000])

        assert matched[5432].name == "db"
        assert matched[6379].name == "cache"
        assert 3000 not in matched

    def test_match_is_substring_of_raw_field(self):
        """Test the ':<port>->' substring rule, including its prefix overlap."""
        containers = parse_container_listing("web|nginx|0.0.0.0:18080->80/tcp")

        assert match_ports(containers, [8080]) == {}
        assert match_ports(containers, [18080])[18080].name == "web"


@pytest.mark.unit
class TestContainerPortResolver:
    """Test cases for ContainerPortResolver batching and caching."""

    @pytest.mark.asyncio
    async def test_batch_uses_one_listing(self, container_lookup, fake_clock):
        container_lookup.lines = DOCKER_PS_OUTPUT.splitlines()
        resolver = ContainerPortResolver(container_lookup, clock=fake_clock)

        result = await resolver.resolve_batch([5432, 6379, 3000, 5432])

        assert set(result) == {5432, 6379}
        assert container_lookup.call_count == 1

    @pytest.mark.asyncio
    async def test_cached_ports_skip_listing(self, container_lookup, fake_clock):
        container_lookup.lines = DOCKER_PS_OUTPUT.splitlines()
        resolver = ContainerPortResolver(container_lookup, clock=fake_clock)
        await resolver.resolve_batch([5432, 6379])

        result = await resolver.resolve_batch([5432, 6379])

        assert set(result) == {5432, 6379}
        assert container_lookup.call_count == 1

    @pytest.mark.asyncio
    async def test_unmatched_port_triggers_listing_each_time(self, container_lookup, fake_clock):
        """Test that negative results are not cached."""
        resolver = ContainerPortResolver(container_lookup, clock=fake_clock)

        assert await resolver.resolve(3000) is None
        assert await resolver.resolve(3000) is None
        assert container_lookup.call_count == 2

    @pytest.mark.asyncio
    async def test_cache_expiry(self, container_lookup, fake_clock):
        container_lookup.lines = DOCKER_PS_OUTPUT.splitlines()
        resolver = ContainerPortResolver(container_lookup, ttl=30.0, clock=fake_clock)
        await resolver.resolve(5432)

        fake_clock.advance(31.0)
        info = await resolver.resolve(5432)

        assert info.name == "db"
        assert container_lookup.call_count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            ToolUnavailableError("docker not installed", command="docker"),
            ToolExecutionError("daemon not running", command="docker", returncode=1),
            OSError(8, "Exec format error"),
        ],
    )
    async def test_runtime_failure_returns_empty_map(self, container_lookup, fake_clock, error):
        container_lookup.error = error
        resolver = ContainerPortResolver(container_lookup, clock=fake_clock)

        assert await resolver.resolve_batch([5432]) == {}
        assert resolver.size() == 0

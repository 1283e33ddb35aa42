"""
Unit tests for parent-to-child label inheritance.
"""

import pytest

from proclabel.identification import inherit_identity, should_inherit
from proclabel.identification.relationship import (
    is_development_tool_chain,
    is_same_project,
    is_script_execution_chain,
)
from proclabel.models import IdentifiedProcess, ProcessCategory, ProcessQuery

NPM_DEV = IdentifiedProcess(display_name="npm:dev", category=ProcessCategory.TOOL, project="shop", port=None)


@pytest.mark.unit
class TestRelationshipChecks:
    """Test cases for the relationship predicates."""

    def test_development_tool_chain(self):
        assert is_development_tool_chain("npm run dev", "node /shop/node_modules/.bin/next-server")
        assert not is_development_tool_chain("npm run dev", "postgres")

    def test_same_project(self):
        assert is_same_project("node /Users/ann/shop/dist/worker.js", "shop")
        assert not is_same_project("node /Users/ann/blog/dist/worker.js", "shop")

    def test_script_execution_chain(self):
        assert is_script_execution_chain("/bin/zsh", "python3 build.py")
        assert is_script_execution_chain("node", "/usr/bin/env ./tools/gen.js")
        assert not is_script_execution_chain("launchd", "python3 build.py")


@pytest.mark.unit
class TestInheritance:
    """Test cases for should_inherit and inherit_identity."""

    def test_dev_server_child_keeps_parent_label(self):
        parent = ProcessQuery(pid=1, command="npm run dev")
        child = ProcessQuery(pid=2, command="node /shop/node_modules/.bin/next-server", port=3000, ppid=1)

        assert should_inherit(child, parent, NPM_DEV)

        inherited = inherit_identity(NPM_DEV, child)
        assert inherited.display_name == "npm:dev"
        assert inherited.port == 3000
        assert inherited.project == "shop"

    def test_other_child_gets_composite_label(self):
        child = ProcessQuery(pid=2, command="/usr/local/bin/esbuild --service=0.19.0", ppid=1)

        inherited = inherit_identity(NPM_DEV, child)

        assert inherited.display_name == "npm:dev->esbuild"
        assert inherited.port is None

    def test_unrelated_child(self):
        parent = ProcessQuery(pid=1, command="launchd")
        child = ProcessQuery(pid=2, command="postgres -D /var/lib/pg", ppid=1)
        parent_identity = IdentifiedProcess(display_name="launchd", category=ProcessCategory.SYSTEM)

        assert not should_inherit(child, parent, parent_identity)

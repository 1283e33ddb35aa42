"""
Command-line classification rules.

Each rule pairs a structural test on the command line with a builder that
turns the match and the resolved context into a label. Rules are evaluated
in the order returned by build_default_rules(); the first rule whose
``matches`` succeeds decides the label. Several rules can match the same
command (``node /usr/local/bin/npm run dev`` is both a package-manager run
and a runtime script), so the order is part of the behavior.
"""

import os
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from ..models import IdentifiedProcess, ProcessCategory, ProcessContext

# Script names that say nothing about what is running.
ENTRY_POINT_SCRIPTS = frozenset(["index", "main", "app", "server"])

# Executables of macOS app bundles that only name a release channel.
VERSION_MARKERS = frozenset(["stable", "beta", "canary", "alpha", "dev", "nightly"])

RUNTIME_EXECUTABLES = frozenset(["node", "bun", "python", "python3", "ruby", "php", "deno"])

_SCRIPT_EXTENSION = re.compile(r"\.(?:js|ts|mjs|cjs|py|rb|go|rs|php|jar)$", re.IGNORECASE)


def executable_basename(command: str) -> str:
    """Path-stripped first whitespace-delimited token of a command line."""
    parts = command.split()
    if not parts:
        return ""
    return os.path.basename(parts[0]) or parts[0]


class Rule(ABC):
    """One entry of the ordered classification list."""

    name = "rule"

    @abstractmethod
    def matches(self, command: str) -> Optional[re.Match]:
        """Return match data when the rule applies to ``command``."""

    @abstractmethod
    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        """Build the label from this rule's match data and the context."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class RegexRule(Rule):
    """Rule whose structural test is a single regular-expression search."""

    pattern: re.Pattern

    def matches(self, command: str) -> Optional[re.Match]:
        return self.pattern.search(command)


class SelfCommandRule(RegexRule):
    """Invocations of proclabel itself, with short aliases expanded."""

    name = "self"
    pattern = re.compile(r"(?:^|[\s/])proclabel(?:\.cli\.main)?\s+(\w+)", re.IGNORECASE)

    ALIASES: Dict[str, str] = {
        "m": "monitor",
        "ps": "process",
        "i": "identify",
    }

    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        subcommand = match.group(1)
        return IdentifiedProcess(
            display_name=f"proclabel:{self.ALIASES.get(subcommand, subcommand)}",
            category=ProcessCategory.TOOL,
            project="proclabel",
        )


class ProjectCliRule(RegexRule):
    """A JavaScript CLI run from a project's build output.

    ``node ~/code/linter/dist/cli.js check`` is ``linter:check``. Entry-point
    scripts (index, main, app, server) are left to RuntimeScriptRule, global
    installs (``/usr/local/bin/npm``) and packages under node_modules to the
    tool-specific rules.
    """

    name = "project-cli"
    pattern = re.compile(
        r"^(?:bun|node)\s+(?:\S*/)?([^/\s]+)/(?:dist|bin|lib|build)/"
        r"(?!(?:index|main|app|server)(?:\.(?:js|ts|mjs|cjs))?(?:\s|$))"
        r"([^/\s]+?)(?:\.(?:js|ts|mjs|cjs))?(?=\s|$)(?:\s+(\w+))?",
        re.IGNORECASE,
    )

    # Install prefixes and runtime version directories of global tools.
    _INSTALL_DIRS = re.compile(r"^(?:usr|local|opt|homebrew|v?\d+(?:\.\d+)*)$", re.IGNORECASE)

    def matches(self, command: str) -> Optional[re.Match]:
        match = self.pattern.search(command)
        if match is None:
            return None
        project = match.group(1)
        # A dependency package is not the project running it.
        if self._INSTALL_DIRS.match(project) or f"node_modules/{project}/" in command:
            return None
        return match

    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        project, script, subcommand = match.group(1), match.group(2), match.group(3)
        tool_name = project if script.lower() == "cli" else script
        return IdentifiedProcess(
            display_name=f"{tool_name}:{subcommand}" if subcommand else tool_name,
            category=ProcessCategory.TOOL,
            project=project,
        )


class VercelRule(RegexRule):
    name = "vercel"
    pattern = re.compile(r"node.*/(vc|vercel)\s+(\w+)", re.IGNORECASE)

    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        return IdentifiedProcess(
            display_name=f"vercel:{match.group(2)}",
            category=ProcessCategory.WEB,
            project=context.project_name,
        )


class DevServerRule(RegexRule):
    """Known web development servers, labelled with their project."""

    name = "dev-server"
    pattern = re.compile(
        r"(?:node.*/|^)(next|nuxt|vite|webpack-dev-server|react-scripts)\b", re.IGNORECASE
    )

    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        server = match.group(1).lower()
        return IdentifiedProcess(
            display_name=f"{server}:{context.project_name}" if context.project_name else server,
            category=ProcessCategory.WEB,
            project=context.project_name,
        )


class PackageManagerRule(RegexRule):
    name = "package-manager"
    pattern = re.compile(r"(?:^|[\s/])(npm|yarn|pnpm|bun)\s+(?:run\s+)?(\w+)", re.IGNORECASE)

    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        return IdentifiedProcess(
            display_name=f"{match.group(1).lower()}:{match.group(2)}",
            category=ProcessCategory.TOOL,
            project=context.project_name,
        )


class DatabaseRule(RegexRule):
    name = "database"
    pattern = re.compile(r"(postgres|postgresql|mysql|mongodb|redis|elasticsearch)", re.IGNORECASE)

    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        return IdentifiedProcess(
            display_name=match.group(1).lower(),
            category=ProcessCategory.DATABASE,
        )


class RuntimeScriptRule(RegexRule):
    """``<runtime> <script>``; entry-point scripts collapse to the project."""

    name = "runtime-script"
    pattern = re.compile(
        r"^(node|python\d*(?:\.\d+)?|ruby|java|go|rust|php)\s+(.+)", re.IGNORECASE
    )

    def matches(self, command: str) -> Optional[re.Match]:
        match = self.pattern.search(command)
        # A runtime followed only by whitespace has no script.
        if match is None or not match.group(2).split():
            return None
        return match

    @staticmethod
    def script_argument(args: Sequence[str]) -> str:
        """First non-option argument; ``-m module`` yields the module."""
        for index, arg in enumerate(args):
            if arg == "-m" and index + 1 < len(args):
                return args[index + 1]
            if not arg.startswith("-"):
                return arg
        return args[0] if args else ""

    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        runtime = match.group(1)
        script = self.script_argument(match.group(2).split())
        script_name = _SCRIPT_EXTENSION.sub("", os.path.basename(script.rstrip("/")) or script)

        if script_name.lower() in ENTRY_POINT_SCRIPTS and context.project_name:
            script_name = context.project_name

        return IdentifiedProcess(
            display_name=f"{runtime}:{script_name}",
            category=ProcessCategory.SCRIPT,
            project=context.project_name,
        )


class ShellRule(RegexRule):
    """Interactive shells. No project context: a shell is not the project."""

    name = "shell"
    pattern = re.compile(r"^(-?(?:.*/)?(sh|bash|zsh|fish|csh|tcsh))\s*(-.*)?$", re.IGNORECASE)

    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        return IdentifiedProcess(display_name=match.group(2), category=ProcessCategory.SYSTEM)


class MacAppRule(RegexRule):
    """Executables inside macOS application bundles.

    - release-channel executables (``Warp.app/.../MacOS/stable``) -> ``Warp``
    - nested helper bundles -> ``App:HelperType``
    - executable named like the app -> ``App``
    - anything else -> ``App:executable``
    """

    name = "mac-app"
    pattern = re.compile(r"/Applications/", re.IGNORECASE)

    _ARGS_START = re.compile(r"\s+--?\w")
    _APP_BUNDLE = re.compile(r"/([^/]+)\.app", re.IGNORECASE)
    _PARENTHESIZED = re.compile(r"\(([^)]+)\)")

    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        command = match.string
        args_start = self._ARGS_START.search(command)
        exec_path = command[:args_start.start()].strip() if args_start else command.strip()

        bundles = self._APP_BUNDLE.findall(exec_path)
        if not bundles:
            return IdentifiedProcess(
                display_name=executable_basename(command), category=ProcessCategory.SYSTEM
            )

        primary_app, last_app = bundles[0], bundles[-1]
        exec_name = os.path.basename(exec_path)

        if exec_name.lower() in VERSION_MARKERS:
            return IdentifiedProcess(display_name=primary_app, category=ProcessCategory.APP)

        if last_app != primary_app and "Helper" in last_app:
            if "Browser Helper" in exec_name:
                kind = self._PARENTHESIZED.search(exec_name)
                helper_type = f"Helper:{kind.group(1)}" if kind else "Helper"
            elif "Code Helper" in exec_name:
                helper_type = "Code Helper"
            else:
                helper_type = re.sub(r"\s*\([^)]+\)", "", last_app, count=1)
            return IdentifiedProcess(
                display_name=f"{primary_app}:{helper_type}", category=ProcessCategory.APP
            )

        if re.sub(r"[\s-]", "", exec_name).lower() == re.sub(r"[\s-]", "", primary_app).lower():
            return IdentifiedProcess(display_name=primary_app, category=ProcessCategory.APP)

        return IdentifiedProcess(
            display_name=f"{primary_app}:{exec_name}", category=ProcessCategory.APP
        )


class RuntimeToolRule(Rule):
    """Tools run by a runtime that the earlier rules did not recognise.

    Covers absolute runtime paths (``/usr/local/bin/node /opt/x/deploy.js up``)
    and runtimes without a rule of their own (bun, deno).
    """

    name = "runtime-tool"

    _TOOL_SCRIPT = re.compile(r"/([\w-]+)\.(?:js|ts|py|rb|php|mjs)\b(?:\s+(\w+))?")
    _GENERIC_SCRIPTS = frozenset(["cli", "index", "main", "app", "server", "run"])

    def matches(self, command: str) -> Optional[re.Match]:
        if executable_basename(command).lower() not in RUNTIME_EXECUTABLES:
            return None
        return re.search(r"\S+", command)

    def build(self, match: re.Match, context: ProcessContext) -> IdentifiedProcess:
        command = match.string
        tool_match = self._TOOL_SCRIPT.search(command)
        if tool_match:
            script_name, subcommand = tool_match.group(1), tool_match.group(2)
            tool_name = script_name
            if script_name in self._GENERIC_SCRIPTS and context.project_name:
                tool_name = context.project_name
            return IdentifiedProcess(
                display_name=f"{tool_name}:{subcommand}" if subcommand else tool_name,
                category=ProcessCategory.TOOL,
                project=context.project_name,
            )

        if context.project_name:
            return IdentifiedProcess(
                display_name=context.project_name,
                category=ProcessCategory.TOOL,
                project=context.project_name,
            )

        return IdentifiedProcess(
            display_name=executable_basename(command), category=ProcessCategory.SYSTEM
        )


def build_default_rules() -> List[Rule]:
    """The classification rules in priority order."""
    return [
        SelfCommandRule(),
        ProjectCliRule(),
        VercelRule(),
        DevServerRule(),
        PackageManagerRule(),
        DatabaseRule(),
        RuntimeScriptRule(),
        ShellRule(),
        MacAppRule(),
        RuntimeToolRule(),
    ]

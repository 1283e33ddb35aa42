"""
Command-line classification: ordered rules and their matcher.
"""

from .matcher import PatternMatcher
from .rules import (
    DatabaseRule,
    DevServerRule,
    MacAppRule,
    PackageManagerRule,
    ProjectCliRule,
    RegexRule,
    Rule,
    RuntimeScriptRule,
    RuntimeToolRule,
    SelfCommandRule,
    ShellRule,
    VercelRule,
    build_default_rules,
    executable_basename,
)

__all__ = [
    "PatternMatcher",
    "Rule",
    "RegexRule",
    "SelfCommandRule",
    "ProjectCliRule",
    "VercelRule",
    "DevServerRule",
    "PackageManagerRule",
    "DatabaseRule",
    "RuntimeScriptRule",
    "ShellRule",
    "MacAppRule",
    "RuntimeToolRule",
    "build_default_rules",
    "executable_basename",
]

"""
First-match-wins evaluation of the classification rules.
"""

import logging
from typing import Iterable, List, Optional

from ..models import IdentifiedProcess, ProcessContext
from .rules import Rule, build_default_rules

logger = logging.getLogger(__name__)


class PatternMatcher:
    """
    Classifies command lines with an ordered list of rules.

    Rules are tried strictly in order and the first structural match wins;
    there is no scoring and no search for a better match further down.
    """

    def __init__(self, rules: Optional[Iterable[Rule]] = None) -> None:
        """
        Args:
            rules: Rules in priority order. Defaults to build_default_rules().
        """
        self.rules: List[Rule] = list(rules) if rules is not None else build_default_rules()

    def apply_patterns(
        self, command: str, context: Optional[ProcessContext] = None
    ) -> Optional[IdentifiedProcess]:
        """
        Label ``command`` with the first matching rule.

        Args:
            command: Full command line.
            context: Resolved cwd, project name and port.

        Returns:
            The label built by the first matching rule, or None when no rule
            applies.
        """
        context = context or ProcessContext()
        for rule in self.rules:
            match = rule.matches(command)
            if match is None:
                continue
            identified = rule.build(match, context)
            logger.debug(f"Rule '{rule.name}' labelled '{command[:80]}' as '{identified.display_name}'")
            return identified
        return None

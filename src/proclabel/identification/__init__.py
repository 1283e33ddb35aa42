"""
Process identification: the engine plus batch-level tree helpers.
"""

from .engine import IdentificationEngine
from .relationship import inherit_identity, should_inherit
from .tree import ProcessTree

__all__ = [
    "IdentificationEngine",
    "ProcessTree",
    "should_inherit",
    "inherit_identity",
]

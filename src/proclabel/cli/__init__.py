"""
Command-line interface for proclabel.
"""

from .main import main_cli

__all__ = ["main_cli"]

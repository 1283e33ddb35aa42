"""
Process snapshot collectors.
"""

from .process_snapshot import collect_listening_ports, collect_process_queries

__all__ = ["collect_listening_ports", "collect_process_queries"]

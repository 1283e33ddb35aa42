"""
Process snapshot collection using the 'psutil' library.

Builds the ProcessQuery records of one refresh tick: every process (or only
the listening ones) with its command line, parent pid and lowest listening
TCP port.
"""

import logging
from typing import Dict, List

import psutil

from ..models import ProcessQuery

logger = logging.getLogger(__name__)


def collect_listening_ports() -> Dict[int, int]:
    """
    Map pid to the lowest TCP port it listens on.

    Listing sockets of other users' processes needs elevated privileges on
    some platforms; without them the map is empty rather than an error.
    """
    ports: Dict[int, int] = {}
    try:
        connections = psutil.net_connections(kind="inet")
    except psutil.AccessDenied:
        logger.debug("Listing sockets requires elevated privileges; ports are not shown")
        return ports

    for conn in connections:
        if conn.status != psutil.CONN_LISTEN or not conn.pid or not conn.laddr:
            continue
        port = conn.laddr.port
        if conn.pid not in ports or port < ports[conn.pid]:
            ports[conn.pid] = port
    return ports


def collect_process_queries(listening_only: bool = True) -> List[ProcessQuery]:
    """
    Snapshot running processes as identification queries.

    Args:
        listening_only: Only include processes that listen on a TCP port.

    Returns:
        Queries sorted by pid. Processes that vanish or deny access while
        being read are skipped.
    """
    ports = collect_listening_ports()
    queries: List[ProcessQuery] = []

    for proc in psutil.process_iter(["pid", "ppid", "name", "cmdline"]):
        try:
            info = proc.info
            pid = info["pid"]
            if listening_only and pid not in ports:
                continue

            cmdline = info.get("cmdline") or []
            command = " ".join(cmdline) if cmdline else (info.get("name") or "")
            if not command:
                continue

            queries.append(
                ProcessQuery(
                    pid=pid,
                    command=command,
                    port=ports.get(pid),
                    ppid=info.get("ppid"),
                )
            )
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue

    queries.sort(key=lambda query: query.pid)
    logger.debug(f"Collected {len(queries)} process(es) ({len(ports)} listening)")
    return queries

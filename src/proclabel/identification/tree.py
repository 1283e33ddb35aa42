"""
Parent/child relationships among the processes of one batch.
"""

from typing import Dict, Iterable, List, Optional, Set

from ..models import ProcessQuery


class ProcessTree:
    """Process tree restricted to the queries of a single batch."""

    def __init__(self, processes: Iterable[ProcessQuery]) -> None:
        self._processes: Dict[int, ProcessQuery] = {}
        self._children: Dict[int, Set[int]] = {}
        self._parents: Dict[int, int] = {}

        for process in processes:
            self._processes[process.pid] = process
            if process.ppid and process.ppid != process.pid:
                self._parents[process.pid] = process.ppid
                self._children.setdefault(process.ppid, set()).add(process.pid)

    def get_parent(self, pid: int) -> Optional[ProcessQuery]:
        """Parent query of ``pid`` if the parent is part of the batch."""
        ppid = self._parents.get(pid)
        return self._processes.get(ppid) if ppid else None

    def get_children(self, pid: int) -> List[ProcessQuery]:
        return [
            self._processes[child]
            for child in sorted(self._children.get(pid, ()))
            if child in self._processes
        ]

    def is_descendant_of(self, child_pid: int, ancestor_pid: int) -> bool:
        current = child_pid
        visited: Set[int] = set()
        while current and current not in visited:
            visited.add(current)
            parent = self._parents.get(current)
            if parent == ancestor_pid:
                return True
            current = parent or 0
        return False

    def depth(self, pid: int) -> int:
        """Number of ancestors of ``pid`` that are part of the batch."""
        depth = 0
        current = pid
        visited = {pid}
        while True:
            parent = self._parents.get(current)
            if parent is None or parent not in self._processes or parent in visited:
                return depth
            visited.add(parent)
            depth += 1
            current = parent

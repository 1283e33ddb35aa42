"""
Context resolvers: working directories, containers and project names.
"""

from .containers import ContainerPortResolver, match_ports, parse_container_listing
from .cwd import CwdResolver, parse_lsof_cwd_output
from .project import extract_project_name

__all__ = [
    "ContainerPortResolver",
    "CwdResolver",
    "extract_project_name",
    "match_ports",
    "parse_container_listing",
    "parse_lsof_cwd_output",
]

"""codeowners-filter: resolve CODEOWNERS ownership into patterns and path trees."""

from .config import OwnershipConfig, configure_logging
from .errors import NotFoundError, OwnershipError, ReadError
from .fs import FileSystem, LocalFileSystem, locate_rule_file
from .include import format_as_include_pattern
from .matching import matches
from .resolver import OwnerIndex, resolve
from .rules import Rule, list_owners, parse_rules, specificity
from .session import OwnershipSession, OwnershipSnapshot
from .tree import PathNode, build_tree

__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "NotFoundError",
    "OwnerIndex",
    "OwnershipConfig",
    "OwnershipError",
    "OwnershipSession",
    "OwnershipSnapshot",
    "PathNode",
    "ReadError",
    "Rule",
    "build_tree",
    "configure_logging",
    "format_as_include_pattern",
    "list_owners",
    "locate_rule_file",
    "matches",
    "parse_rules",
    "resolve",
    "specificity",
]

"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - Enum values are the exact wire strings accepted by the HTTP surface

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


class FileState(str, Enum):
    """File lifecycle states — derived from `deleted_at` and row existence."""
    ACTIVE = "active"
    TRASHED = "trashed"
    PURGED = "purged"


class LifecycleAction(str, Enum):
    """Owner-only transitions over FileState."""
    TRASH = "trash"
    RESTORE = "restore"
    PURGE = "purge"


class AccessRight(str, Enum):
    """What a caller needs from a file. WRITE implies READ."""
    READ = "read"
    WRITE = "write"


class ListView(str, Enum):
    """Mutually exclusive file listing filters."""
    ALL = "all"
    MY_FILES = "my-files"
    SHARED = "shared"
    TRASH = "trash"


class SortKey(str, Enum):
    """Ordering options for non-trash listings."""
    LAST_MODIFIED = "last-modified"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    NEWEST = "newest"


class ElementType(str, Enum):
    """Discriminator for canvas elements."""
    RECTANGLE = "rectangle"
    LINE = "line"
    TEXT = "text"
    ASSET = "asset"

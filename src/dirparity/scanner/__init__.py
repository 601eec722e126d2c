"""Tree enumeration and set reconciliation."""

from .enumerator import enumerate_files
from .ignore import matches_ignore_pattern
from .reconciler import reconcile

__all__ = ["enumerate_files", "matches_ignore_pattern", "reconcile"]

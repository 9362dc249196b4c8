"""splat package root."""

from splat.exceptions import (
    DuplicateParameterName,
    GeneratedNameConflict,
    NoProperties,
    SplatError,
    TargetBundleNotFound,
    UnresolvedBundleReference,
)
from splat.markers import splat

__all__ = [
    "__version__",
    "DuplicateParameterName",
    "GeneratedNameConflict",
    "NoProperties",
    "SplatError",
    "TargetBundleNotFound",
    "UnresolvedBundleReference",
    "splat",
]

__version__ = "0.1.0"

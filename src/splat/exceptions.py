"""Diagnostics raised by the splat expansion pass."""

from __future__ import annotations

from typing import Sequence


class SplatError(Exception):
    """Structural failure of one expansion.

    Each subclass is fatal for the class being expanded; the engine reports
    it at the decoration site and moves on to the next class.
    """

    def __init__(self, diagnostic: str) -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic


class TargetBundleNotFound(SplatError):
    def __init__(self, struct_name: str) -> None:
        super().__init__(f"@splat requires a nested class named '{struct_name}'")
        self.struct_name = struct_name


class NoProperties(SplatError):
    def __init__(self) -> None:
        super().__init__("Target type has no stored fields to flatten")


class DuplicateParameterName(SplatError):
    def __init__(self, name: str, paths: Sequence[str]) -> None:
        locations = ", ".join(paths)
        super().__init__(
            f"Flattened parameter '{name}' is declared more than once ({locations})"
        )
        self.name = name
        self.paths = tuple(paths)


class UnresolvedBundleReference(SplatError):
    def __init__(self, field_name: str, annotation: str) -> None:
        super().__init__(
            f"Field '{field_name}' references '{annotation}' but no matching nested bundle was found"
        )
        self.field_name = field_name
        self.annotation = annotation


class GeneratedNameConflict(SplatError):
    def __init__(self, container: str, method_name: str) -> None:
        super().__init__(
            f"'{container}' already defines a different member named '{method_name}'"
        )
        self.container = container
        self.method_name = method_name

"""Project settings from the ``[splat]`` table of ``splat.toml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, TypeAlias
import logging
import tomllib

from splat.synthesis.model import ExpansionSettings, SplatConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "splat.toml"
SECTION_NAME = "splat"

SplatSection: TypeAlias = dict[str, Any]

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


def splat_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> SplatSection:
    """Return the ``[splat]`` table, or ``{}`` when there is none.

    A missing file is silent. An unreadable or malformed one is logged and
    treated as empty, so the built-in defaults apply.
    """
    if config_path is None:
        config_path = (root if root is not None else Path.cwd()) / DEFAULT_CONFIG_NAME
    try:
        document = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring %s: %s", config_path, exc)
        return {}
    section = document.get(SECTION_NAME, {})
    return section if isinstance(section, dict) else {}


def _decorator_names(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return ()
    names = (item.strip() for item in value if isinstance(item, str))
    return tuple(name for name in names if name)


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return default


def _as_name(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip().isidentifier():
        return value.strip()
    return default


def splat_config(section: Mapping[str, Any] | None) -> SplatConfig:
    base = SplatConfig()
    if not section:
        return base
    return SplatConfig(
        struct_name=_as_name(section.get("struct_name"), base.struct_name),
        property_name=_as_name(section.get("property_name"), base.property_name),
    )


def expansion_settings(section: Mapping[str, Any] | None) -> ExpansionSettings:
    base = ExpansionSettings()
    if not section:
        return base
    return ExpansionSettings(
        method_name=_as_name(section.get("method_name"), base.method_name),
        strict_references=_as_bool(section.get("strict_references"), base.strict_references),
        allow_empty_bundle=_as_bool(section.get("allow_empty_bundle"), base.allow_empty_bundle),
        decorator_names=_decorator_names(section.get("decorators")) or base.decorator_names,
    )


def apply_overrides(section: Mapping[str, Any], overrides: Mapping[str, Any]) -> SplatSection:
    """Layer command-line or request values over ``section``; ``None`` keeps the file value."""
    merged = dict(section)
    merged.update((key, value) for key, value in overrides.items() if value is not None)
    return merged

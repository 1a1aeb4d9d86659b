"""Shared helpers for reading typed values out of raw YAML mappings.

Every helper takes the full dotted key path (``queries.tasks.per_page``) so
that errors point at the exact place in the file.
"""

from __future__ import annotations

from typing import Any, Mapping


def get_section(raw: Mapping[str, Any], key: str, *, required: bool, config_key: str | None = None) -> Mapping[str, Any]:
    """Return a nested mapping.

    Args:
        raw: Parent configuration mapping.
        key: Section name inside ``raw``.
        required: Whether a missing section is an error.
        config_key: Full key path for error messages; defaults to ``key``.

    Returns:
        The section, or an empty mapping when an optional section is absent.

    Raises:
        ValueError: If a required section is missing.
        TypeError: If the section is not a mapping.
    """
    path = config_key or key
    if raw.get(key) is None:
        if required:
            raise ValueError(f"Missing required config: {path}")
        return {}
    return expect_mapping(raw[key], path)


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    """Return ``section[field]``, raising ValueError naming ``config_key`` when absent."""
    if field not in section:
        raise ValueError(f"Missing required config: {config_key}")
    return section[field]


def get_optional_value(section: Mapping[str, Any], field: str, default: Any) -> Any:
    return section.get(field, default)


def optional_str(section: Mapping[str, Any], field: str, config_key: str) -> str | None:
    """Return an optional string field; missing or null reads as None."""
    value = section.get(field)
    return None if value is None else expect_str(value, config_key)


def optional_int(section: Mapping[str, Any], field: str, config_key: str) -> int | None:
    """Return an optional integer field; missing or null reads as None."""
    value = section.get(field)
    return None if value is None else expect_int(value, config_key)


def expect_str(value: Any, config_key: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{config_key} must be a string")
    return value


def expect_bool(value: Any, config_key: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{config_key} must be a boolean")
    return value


def expect_int(value: Any, config_key: str) -> int:
    # YAML booleans are ints in Python.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{config_key} must be an integer")
    return value


def expect_list(value: Any, config_key: str) -> list[Any]:
    if not isinstance(value, list):
        raise TypeError(f"{config_key} must be a list")
    return value


def expect_str_list(value: Any, config_key: str) -> list[str]:
    """Validate a list whose items are all strings."""
    return [expect_str(item, f"{config_key}[{idx}]") for idx, item in enumerate(expect_list(value, config_key))]


def expect_mapping(value: Any, config_key: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{config_key} must be an object")
    return value

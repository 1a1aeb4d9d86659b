"""Output domain configuration for list results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from AdminQuery.config.common import expect_str, expect_str_list, get_optional_value, get_section

OUTPUT_FORMATS = ("console", "json")


@dataclass(frozen=True, slots=True)
class OutputConfig:
    """Where and how list results are written.

    Attributes:
        base_dir: Directory for file outputs; JSON lands in ``{base_dir}/json``.
        formats: Enabled writers, de-duplicated, in declaration order.
        link_path: Prefix of toggle-link targets; the query name is appended.
    """

    base_dir: str
    formats: tuple[str, ...]
    link_path: str = ""


def load_output(raw: Mapping[str, Any]) -> OutputConfig:
    """Read the ``output`` section.

    Missing keys default to ``output/``, console only and an empty link prefix.

    Raises:
        TypeError: If a value has the wrong type.
    """
    section = get_section(raw, "output", required=False)
    formats: list[str] = []
    for item in expect_str_list(get_optional_value(section, "formats", ["console"]), "output.formats"):
        name = item.strip().lower()
        if name not in formats:
            formats.append(name)
    return OutputConfig(
        base_dir=expect_str(get_optional_value(section, "base_dir", "output"), "output.base_dir"),
        formats=tuple(formats),
        link_path=expect_str(get_optional_value(section, "link_path", ""), "output.link_path").rstrip("/"),
    )


def check_output(config: OutputConfig) -> None:
    """Validate the selected formats and output directory.

    Raises:
        ValueError: If no format or an unknown format is selected.
    """
    if not config.formats:
        raise ValueError("output.formats must include at least one format")
    unknown = [name for name in config.formats if name not in OUTPUT_FORMATS]
    if unknown:
        raise ValueError(f"output.formats has unknown formats: {unknown} (known: {list(OUTPUT_FORMATS)})")
    if "json" in config.formats and not config.base_dir.strip():
        raise ValueError("output.base_dir must not be empty when json output is enabled")

"""Helpers for the serialized type identifiers used in event payloads."""

from __future__ import annotations

import re

# "0T:" / "1T:" / "e:" style kind prefixes in front of a type identifier
_KIND_PREFIX = re.compile(r"^[0-9]*[A-Za-z]:")


def strip_assembly(qualified_name: str) -> str:
    """Remove the ", Assembly[, Version]" suffix of a type identifier.

    Generic arguments in square brackets may themselves contain commas, so
    only a comma at bracket depth zero ends the type part.
    """
    depth = 0
    for index, char in enumerate(qualified_name):
        if char in "[<":
            depth += 1
        elif char in "]>":
            depth -= 1
        elif char == "," and depth == 0:
            return qualified_name[:index].strip()
    return qualified_name.strip()


def assembly_of(qualified_name: str) -> str | None:
    type_part = strip_assembly(qualified_name)
    rest = qualified_name.strip()[len(type_part):].lstrip(", ").strip()
    if not rest:
        return None
    return rest.split(",")[0].strip() or None


def strip_kind_prefix(identifier: str) -> str:
    return _KIND_PREFIX.sub("", identifier.strip(), count=1)


def short_name(full_name: str) -> str:
    """Return the last dotted segment, ignoring generic arguments."""
    base = full_name.split("[", 1)[0].split("`", 1)[0]
    return base.rsplit(".", 1)[-1].split("+")[-1]

"""Resolve raw data-cell identifiers to row/column definitions.

Bulk query results reference rows and columns by identifiers such as
``q10_option_3`` rather than by the exact definition id (``q10``).  A
definition matches when the raw value equals its id, or starts with the id
followed by a separator.  Longer ids are tried first so ``q1_sub`` wins over
``q1``; a bare prefix (``q10`` vs ``q1``) never matches.
"""

from __future__ import annotations

from collections.abc import Sequence

from crosstabber.models import Definition

SEPARATORS = ("_", "-", ".", ":", "|", "/")


def find_matching_definition(
    raw: str,
    definitions: Sequence[Definition],
) -> Definition | None:
    """Return the best matching definition for *raw*, or None.

    Never raises: a miss is expected for sparse definitions.
    """
    for definition in definitions:
        if definition.id and definition.id == raw:
            return definition

    by_length = sorted(
        (d for d in definitions if d.id),
        key=lambda d: len(d.id),
        reverse=True,
    )
    for definition in by_length:
        if any(raw.startswith(definition.id + sep) for sep in SEPARATORS):
            return definition
    return None


def resolve_label(raw: str, definitions: Sequence[Definition]) -> str:
    """Human-readable name for *raw*, falling back to *raw* itself."""
    match = find_matching_definition(raw, definitions)
    if match is None or not match.name:
        return raw
    return match.name

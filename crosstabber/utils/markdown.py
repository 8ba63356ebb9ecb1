"""Markdown building blocks shared by the analysis and template renderers."""

from __future__ import annotations

HEADING_1 = "# {title}"
HEADING_2 = "## {title}"
HEADING_3 = "### {title}"
HORIZONTAL_RULE = "---"
BOLD = "**{text}**"
EMPHASIS = "*{text}*"
FIELD = "**{label}**: {value}"


def format_count(n: int | float) -> str:
    """Thousands-separated count: 12345 -> ``12,345``."""
    return f"{n:,}"


def format_numbered_item(position: int, title: str, *details: str) -> list[str]:
    """A numbered bold entry with indented detail lines.

    >>> format_numbered_item(1, "Gaming", "- Index: 150")
    ['1. **Gaming**', '   - Index: 150']
    """
    lines = [f"{position}. {BOLD.format(text=title)}"]
    lines.extend(f"   {d}" for d in details)
    return lines


def format_market_code(code: str) -> str:
    return code.upper()


def format_market_list(codes: list[str]) -> str:
    return ", ".join(format_market_code(c) for c in codes)

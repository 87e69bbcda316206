"""
Text renderer - fills case placeholders into scene text and splits the
result into structured paragraphs for the presentation layer.

Markup rules:
    **bold**    bold span (an unmatched marker stays literal)
    newline     paragraph break (blank lines are dropped)
"""

from __future__ import annotations

import re

from docket.models.game import TextBlock, TextSpan
from docket.models.scenario import CaseProfile

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")
BOLD_MARKER = "**"

# Placeholder token -> text used when no case is active or the field is empty
PLACEHOLDER_FALLBACKS: dict[str, str] = {
    "name": "Unknown",
    "charge": "Unknown",
    "history": "None",
    "victim": "Unknown",
    "incident": "Unknown",
}


def substitute(text: str, case: CaseProfile | None) -> str:
    """Replace recognized {placeholders} with case fields."""

    def _replace(match: re.Match) -> str:
        token = match.group(1)
        if token not in PLACEHOLDER_FALLBACKS:
            return match.group(0)
        value = getattr(case, token, None) if case is not None else None
        return value if value else PLACEHOLDER_FALLBACKS[token]

    return PLACEHOLDER_PATTERN.sub(_replace, text)


def parse_spans(line: str) -> list[TextSpan]:
    """Split one paragraph into plain and bold spans."""
    parts = line.split(BOLD_MARKER)
    if len(parts) % 2 == 0:
        # Odd number of markers: the last one has no partner
        parts[-2:] = [parts[-2] + BOLD_MARKER + parts[-1]]

    spans = []
    for i, part in enumerate(parts):
        if part:
            spans.append(TextSpan(text=part, bold=i % 2 == 1))
    return spans


def render(text: str, case: CaseProfile | None = None) -> list[TextBlock]:
    """Render scene text into paragraphs.

    Args:
        text: Scene text template
        case: Active case profile, or None before one is assigned

    Returns:
        One TextBlock per non-blank line
    """
    blocks = []
    for line in substitute(text, case).splitlines():
        line = line.strip()
        if line:
            blocks.append(TextBlock(spans=parse_spans(line)))
    return blocks

"""
Option visibility - which of a scene's options the player may pick.

Visibility is derived from the current flags, never stored.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from docket.models.scenario import Option


def is_option_visible(option: Option, flags: Mapping[str, bool]) -> bool:
    """An option shows when it has no condition or its flag is set."""
    if option.condition is None:
        return True
    return bool(flags.get(option.condition, False))


def visible_options(
    options: Sequence[Option], flags: Mapping[str, bool]
) -> list[Option]:
    """Filter options down to the selectable ones.

    Args:
        options: The scene's options in display order
        flags: Current playthrough flags

    Returns:
        The visible options, original order preserved
    """
    return [option for option in options if is_option_visible(option, flags)]

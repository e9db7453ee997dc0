"""Fighter status rules.

A fighter's value only counts toward the gang rating while it is still part
of the active roster. Being in recovery or starving does not remove a fighter
from the roster; being killed, retired, enslaved or captured does.
"""

from __future__ import annotations

from typing import Protocol

from mundamanager.domain.enums import FighterStatusAction


class FighterFlags(Protocol):
    """Anything carrying the six fighter status flags."""

    killed: bool
    retired: bool
    enslaved: bool
    captured: bool
    recovery: bool
    starved: bool


def counts_toward_rating(fighter: FighterFlags) -> bool:
    """Return True when the fighter's cost belongs in the gang rating."""

    return not (fighter.killed or fighter.retired or fighter.enslaved or fighter.captured)


def can_be_in_recovery(fighter: FighterFlags) -> bool:
    """Recovery is only meaningful for fighters still on the roster."""

    return counts_toward_rating(fighter)


def is_status_incompatible(fighter: FighterFlags, action: FighterStatusAction | str) -> bool:
    """Return True when ``action`` cannot be applied to the fighter's current state.

    Toggling a flag off is always allowed; setting one requires the fighter
    not to be in another exclusive state already.
    """

    action = FighterStatusAction(action)

    if action is FighterStatusAction.KILL:
        return not fighter.killed and (
            fighter.retired or fighter.enslaved or fighter.captured or fighter.recovery
        )
    if action is FighterStatusAction.RETIRE:
        return not fighter.retired and (
            fighter.killed or fighter.enslaved or fighter.captured or fighter.recovery
        )
    if action is FighterStatusAction.SELL:
        return not fighter.enslaved and (
            fighter.killed or fighter.retired or fighter.captured or fighter.recovery
        )
    if action is FighterStatusAction.CAPTURE:
        return not fighter.captured and (
            fighter.killed or fighter.retired or fighter.enslaved or fighter.recovery
        )
    if action is FighterStatusAction.RECOVER:
        return not fighter.recovery and not can_be_in_recovery(fighter)
    return False

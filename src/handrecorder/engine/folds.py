from __future__ import annotations

from collections.abc import Iterable

from ..core.models import PlayerAction


def folded_seats(prior_action_lists: Iterable[Iterable[PlayerAction]]) -> frozenset[str]:
    """Union of every seat marked Fold across the given streets' action lists."""

    folded: set[str] = set()
    for actions in prior_action_lists:
        folded.update(entry.seat for entry in actions if entry.is_fold)
    return frozenset(folded)

"""Table setup captured before the first street.

Mirrors the screening form: game style, blinds, number of players, then the
hero's seat and stack.  Problems are enumerated rather than raised one at a
time so a form can highlight every field at once.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.models import CASH, GAME_STYLES
from .seating import DEFAULT_TABLE_SIZE, TABLE_LAYOUTS, layout_for

__all__ = ["BLIND_PRESETS", "TableSetup", "build_setup", "validate_setup"]

BLIND_PRESETS: dict[str, tuple[int, int]] = {
    "1/2": (1, 2),
    "1/3": (1, 3),
    "2/5": (2, 5),
    "5/10": (5, 10),
    "10/25": (10, 25),
    "25/50": (25, 50),
}


@dataclass(frozen=True)
class TableSetup:
    game_style: str
    small_blind: float
    big_blind: float
    table_size: int
    hero_seat: str
    stack_size: float
    blinds: str | None = None

    @property
    def layout(self) -> tuple[str, ...]:
        return layout_for(self.table_size)


def _resolve_blinds(
    game_style: str | None,
    blinds: str | None,
    small_blind: float | None,
    big_blind: float | None,
) -> tuple[float | None, float | None, list[str]]:
    problems: list[str] = []
    if game_style == CASH and blinds:
        preset = BLIND_PRESETS.get(blinds)
        if preset is None:
            problems.append(f"blinds: unknown preset '{blinds}'")
            return None, None, problems
        return float(preset[0]), float(preset[1]), problems
    if small_blind is None or big_blind is None:
        problems.append("blinds: small and big blind are required")
        return small_blind, big_blind, problems
    if not math.isfinite(small_blind) or small_blind <= 0:
        problems.append("smallBlind: must be greater than zero")
    if not math.isfinite(big_blind) or big_blind <= small_blind:
        problems.append("bigBlind: must be greater than the small blind")
    return float(small_blind), float(big_blind), problems


def validate_setup(
    *,
    game_style: str | None,
    table_size: int | None,
    hero_seat: str | None,
    stack_size: float | None,
    blinds: str | None = None,
    small_blind: float | None = None,
    big_blind: float | None = None,
) -> list[str]:
    problems: list[str] = []
    if game_style not in GAME_STYLES:
        problems.append(f"gameStyle: expected one of {', '.join(GAME_STYLES)}")
    if blinds and game_style != CASH:
        problems.append("blinds: presets are only available for cash games")
    _, _, blind_problems = _resolve_blinds(game_style, blinds, small_blind, big_blind)
    problems.extend(blind_problems)
    size = table_size if table_size is not None else DEFAULT_TABLE_SIZE
    if size not in TABLE_LAYOUTS:
        problems.append(f"playerCount: must be between {min(TABLE_LAYOUTS)} and {max(TABLE_LAYOUTS)}")
    elif hero_seat not in layout_for(size):
        problems.append(f"position: must be one of {', '.join(layout_for(size))}")
    if stack_size is None or not math.isfinite(stack_size) or stack_size <= 0:
        problems.append("stackSize: must be greater than zero")
    return problems


def build_setup(
    *,
    game_style: str | None,
    table_size: int | None,
    hero_seat: str | None,
    stack_size: float | None,
    blinds: str | None = None,
    small_blind: float | None = None,
    big_blind: float | None = None,
) -> TableSetup:
    problems = validate_setup(
        game_style=game_style,
        table_size=table_size,
        hero_seat=hero_seat,
        stack_size=stack_size,
        blinds=blinds,
        small_blind=small_blind,
        big_blind=big_blind,
    )
    if problems:
        raise ValueError("; ".join(problems))
    sb, bb, _ = _resolve_blinds(game_style, blinds, small_blind, big_blind)
    assert sb is not None and bb is not None and stack_size is not None and hero_seat is not None
    return TableSetup(
        game_style=str(game_style),
        small_blind=sb,
        big_blind=bb,
        table_size=table_size if table_size is not None else DEFAULT_TABLE_SIZE,
        hero_seat=hero_seat,
        stack_size=float(stack_size),
        blinds=blinds if game_style == CASH else None,
    )

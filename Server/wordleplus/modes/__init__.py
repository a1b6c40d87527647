"""
Mode Engines Package

One engine per GameMode, selected by the room's mode tag.
"""

from typing import Dict

from .base import EngineContext, ModeEngine
from .battle import BattleEngine
from .duel import DuelEngine, duel_outcome
from .shared import SharedEngine
from ..models.game import GameMode

ENGINES: Dict[GameMode, ModeEngine] = {
    GameMode.DUEL: DuelEngine(),
    GameMode.BATTLE: BattleEngine(),
    GameMode.SHARED: SharedEngine(),
}

_missing = set(GameMode) - set(ENGINES)
if _missing:
    raise RuntimeError(f"No engine registered for modes: {sorted(m.value for m in _missing)}")


def engine_for(mode: GameMode) -> ModeEngine:
    return ENGINES[mode]


__all__ = [
    'EngineContext', 'ModeEngine', 'DuelEngine', 'BattleEngine', 'SharedEngine',
    'ENGINES', 'engine_for', 'duel_outcome',
]

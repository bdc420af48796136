"""
Timed game phases.
"""

from .night_phase import (
    NightCycleEngine,
    NightActions,
    NightAction,
    NightResolution,
    CyclePhase,
    Winner,
)

__all__ = ['NightCycleEngine', 'NightActions', 'NightAction', 'NightResolution', 'CyclePhase', 'Winner']

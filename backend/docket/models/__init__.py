"""Pydantic models for Docket"""

from docket.models.game import (
    EngineStatus,
    GameState,
    HistoryEntry,
    HistoryStep,
    OptionView,
    TextBlock,
    TextSpan,
    TurnResult,
)
from docket.models.scenario import (
    Accumulator,
    CaseProfile,
    Ending,
    Option,
    RiskFactors,
    Scene,
    ScenarioData,
    ScenarioInfo,
)

__all__ = [
    # Game models
    "EngineStatus",
    "GameState",
    "HistoryEntry",
    "HistoryStep",
    "OptionView",
    "TextBlock",
    "TextSpan",
    "TurnResult",
    # Scenario models
    "Accumulator",
    "CaseProfile",
    "Ending",
    "Option",
    "RiskFactors",
    "Scene",
    "ScenarioData",
    "ScenarioInfo",
]

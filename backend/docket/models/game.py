"""
Game state models - Pydantic models for playthrough state and turn results
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from docket.models.scenario import Accumulator, CaseProfile, Ending


class EngineStatus(str, Enum):
    """Lifecycle of a NarrativeEngine.

    Attributes:
        IDLE: No scenario loaded, or start() not called yet
        PLAYING: A playthrough is in progress
        TERMINAL: The current scene ended the playthrough
    """

    IDLE = "idle"
    PLAYING = "playing"
    TERMINAL = "terminal"


# =============================================================================
# State Models
# =============================================================================

class HistoryStep(BaseModel):
    """One scene/choice pair of the current playthrough"""
    scene_text: str
    choice_text: str


class GameState(BaseModel):
    """State of a single playthrough, owned by one NarrativeEngine"""
    current_scene_id: str
    visited_scene_ids: set[str] = Field(default_factory=set)
    flight_risk: int = 0
    community_harm: int = 0
    professionalism: int = 0
    flags: dict[str, bool] = Field(default_factory=dict)
    active_case: CaseProfile | None = None
    history: list[HistoryStep] = Field(default_factory=list)

    def add_points(self, accumulator: Accumulator, delta: int) -> None:
        """Add a delta to the named accumulator"""
        name = accumulator.value
        setattr(self, name, getattr(self, name) + delta)


class HistoryEntry(BaseModel):
    """Record handed to the external history recorder"""
    scene_text: str
    choice_text: str
    user_id: str
    app_id: str
    timestamp: datetime = Field(default_factory=datetime.now)


# =============================================================================
# Rendering / Turn Models
# =============================================================================

class TextSpan(BaseModel):
    """A run of text, optionally bold"""
    text: str
    bold: bool = False


class TextBlock(BaseModel):
    """A paragraph made of spans"""
    spans: list[TextSpan] = Field(default_factory=list)

    @property
    def plain_text(self) -> str:
        return "".join(span.text for span in self.spans)


class OptionView(BaseModel):
    """A selectable option as shown to the player"""
    index: int
    text: str


class TurnResult(BaseModel):
    """What the presentation layer needs after start/choose/restart"""
    status: EngineStatus
    ready: bool = True
    changed: bool = False  # False when the call was a no-op
    scene_id: str | None = None
    blocks: list[TextBlock] = Field(default_factory=list)
    options: list[OptionView] = Field(default_factory=list)
    ending: Ending | None = None
    show_risk: bool = False  # Suppressed unless risk factors were just applied
    flight_risk: int = 0
    community_harm: int = 0
    professionalism: int = 0
    case_name: str | None = None

    @property
    def game_complete(self) -> bool:
        return self.status == EngineStatus.TERMINAL

"""
Scenario schema models - Pydantic models for YAML scenario definitions
"""

from enum import Enum

from pydantic import BaseModel, Field


class Accumulator(str, Enum):
    """Numeric running totals a playthrough can change"""

    FLIGHT_RISK = "flight_risk"
    COMMUNITY_HARM = "community_harm"
    PROFESSIONALISM = "professionalism"


class RiskFactors(BaseModel):
    """Flight and harm deltas"""
    flight: int = 0
    harm: int = 0


class Ending(BaseModel):
    """Terminal payload shown when a playthrough ends"""
    message: str
    moral: str = ""


class Option(BaseModel):
    """A player choice attached to a scene"""
    text: str
    next: str  # Literal scene id or directive value
    condition: str | None = None  # Flag that must be set for the option to show
    points: int | None = None
    accumulator: Accumulator = Accumulator.PROFESSIONALISM  # Receives `points`
    argument: str | None = None  # Argument tag read by resolvers ("OR", "Bond", ...)


class Scene(BaseModel):
    """Scene definition from scenes.yaml"""
    text: str
    options: list[Option] = Field(default_factory=list)
    risk_factors: RiskFactors | None = None
    ending: Ending | None = None

    @property
    def is_terminal(self) -> bool:
        """A scene ends the playthrough if it has an ending or nowhere to go"""
        return self.ending is not None or not self.options


class CaseProfile(BaseModel):
    """Parameters for randomized case scenes, from cases.yaml"""
    name: str | None = None
    charge: str | None = None
    history: str | None = None
    victim: str | None = None
    incident: str | None = None
    risk_factors: RiskFactors = Field(default_factory=RiskFactors)


class ScenarioInfo(BaseModel):
    """Main scenario definition from scenario.yaml"""
    title: str
    welcome: str = ""
    start_scene: str = "start"


class ScenarioData(BaseModel):
    """Complete loaded scenario"""
    scenario: ScenarioInfo
    scenes: dict[str, Scene]
    cases: list[CaseProfile] = Field(default_factory=list)

    def get_scene(self, scene_id: str) -> Scene | None:
        """Get a scene by ID"""
        return self.scenes.get(scene_id)

    def has_scene(self, scene_id: str) -> bool:
        return scene_id in self.scenes

"""
Shared pytest fixtures for Docket backend tests.

This module provides:
- sample_scenario: Small in-memory scenario graph covering every directive
- case_profiles: Pool of five case profiles for selection tests
- engine: NarrativeEngine over sample_scenario with a seeded random source
- Custom markers for test categorization
"""

from __future__ import annotations

import random
import sys
from pathlib import Path

import pytest

# Add backend to path for imports
backend_path = Path(__file__).parent.parent
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from docket.engine.narrative import NarrativeEngine  # noqa: E402
from docket.models.game import GameState  # noqa: E402
from docket.models.scenario import (  # noqa: E402
    CaseProfile,
    Ending,
    Option,
    RiskFactors,
    Scene,
    ScenarioData,
    ScenarioInfo,
)


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


# =============================================================================
# Scenario Fixtures
# =============================================================================


@pytest.fixture
def case_profiles() -> list[CaseProfile]:
    """Five distinct case profiles."""
    return [
        CaseProfile(
            name=f"Defendant {i}",
            charge=f"Charge {i}",
            history=f"History {i}",
            victim=f"Victim {i}",
            incident=f"Incident {i}",
            risk_factors=RiskFactors(flight=i, harm=i + 1),
        )
        for i in range(5)
    ]


@pytest.fixture
def single_case() -> CaseProfile:
    """The only profile in sample_scenario's pool."""
    return CaseProfile(
        name="Alex Doe",
        charge="Petty theft",
        history=None,
        victim="A corner store",
        incident="Left without paying for a sandwich.",
        risk_factors=RiskFactors(flight=1, harm=0),
    )


@pytest.fixture
def sample_scenes() -> dict[str, Scene]:
    """Create a small scene graph for testing.

    Layout:
        start --(randomCase)--> caseAssigned --> bailHearing --(bailDecision)--> bail*
          |                                                                       |
          +--> lobby <--> hallway <-------------------------------------------------+
                 ^          |  \\--(motionGranted)--> limineGranted --> hallway
                 |          v
               start      trial --(defenseVerdict)--> verdictAcquittal / verdictGuilty

    "Wander off" on the start scene leads to a scene that does not exist.
    """
    return {
        "start": Scene(
            text="Welcome, {name}.\nPick a **door**.",
            options=[
                Option(text="Take a case", next="randomCase"),
                Option(text="Visit the lobby", next="lobby"),
                Option(text="Wander off", next="missingScene"),
            ],
        ),
        "caseAssigned": Scene(
            text="**{name}** faces {charge}.",
            risk_factors=RiskFactors(flight=1, harm=2),
            options=[Option(text="Argue bail", next="bailHearing")],
        ),
        "bailHearing": Scene(
            text="The judge asks for your position.",
            options=[
                Option(text="Ask for OR", next="bailDecision", argument="OR"),
                Option(text="Ask for conditions", next="bailDecision", argument="Conditions"),
                Option(text="Ask for bond", next="bailDecision", argument="Bond"),
            ],
        ),
        "bailOR": Scene(
            text="Released on recognizance.",
            options=[Option(text="Proceed", next="hallway")],
        ),
        "bailConditions": Scene(
            text="Released on conditions.",
            options=[Option(text="Proceed", next="hallway")],
        ),
        "bailBond": Scene(
            text="Bond is set.",
            options=[Option(text="Proceed", next="hallway")],
        ),
        "lobby": Scene(
            text="A crowded lobby.",
            risk_factors=RiskFactors(flight=2, harm=3),
            options=[
                Option(text="Back to start", next="start"),
                Option(text="To the hallway", next="hallway"),
            ],
        ),
        "hallway": Scene(
            text="A long hallway.",
            options=[
                Option(text="Back to lobby", next="lobby"),
                Option(text="File a motion", next="motionGranted"),
                Option(text="Go to trial", next="trial"),
            ],
        ),
        "limineGranted": Scene(
            text="Motion granted.",
            options=[Option(text="Continue", next="hallway")],
        ),
        "trial": Scene(
            text="The jury is seated.",
            options=[
                Option(
                    text="Cite the ruling",
                    next="defenseVerdict",
                    condition="limineSuccess",
                    points=3,
                ),
                Option(text="Argue well", next="defenseVerdict", points=5),
                Option(text="Argue badly", next="defenseVerdict", points=-1),
            ],
        ),
        "verdictAcquittal": Scene(
            text="Not guilty.",
            ending=Ending(message="Acquitted.", moral="Be professional."),
        ),
        "verdictGuilty": Scene(
            text="Guilty.",
            ending=Ending(message="Convicted."),
        ),
    }


@pytest.fixture
def sample_scenario(sample_scenes, single_case) -> ScenarioData:
    """Complete ScenarioData for testing."""
    return ScenarioData(
        scenario=ScenarioInfo(title="Test Scenario", welcome="Welcome!", start_scene="start"),
        scenes=sample_scenes,
        cases=[single_case],
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def engine(sample_scenario) -> NarrativeEngine:
    """Started engine over sample_scenario, no persistence."""
    engine = NarrativeEngine(
        sample_scenario, rng=random.Random(1234), user_id="test-user", app_id="test-app"
    )
    engine.start()
    return engine


@pytest.fixture
def choose_text():
    """Helper: choose the currently visible option with the given label."""

    def _choose(engine: NarrativeEngine, text: str):
        for option in engine.current_options():
            if option.text == text:
                return engine.choose(option)
        raise AssertionError(f"Option {text!r} is not offered")

    return _choose


@pytest.fixture
def sample_game_state(single_case) -> GameState:
    """A GameState with some progress made."""
    return GameState(
        current_scene_id="hallway",
        visited_scene_ids={"lobby", "hallway", "limineGranted"},
        flight_risk=2,
        community_harm=3,
        professionalism=1,
        flags={"limineSuccess": True},
        active_case=single_case,
    )

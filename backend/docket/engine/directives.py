"""
Directives and their resolvers.

A directive is a symbolic `next` value on an Option. Instead of naming a
scene, it asks a resolver to compute the target from the accumulated state.

Resolvers are pure: they read a GameState snapshot and the chosen option
and return a Resolution. Any effect a resolver wants (assigning a case,
setting a flag) is carried on the Resolution and applied by the engine only
once the target scene is known to exist.

Every Directive member must have a resolver registered in RESOLVERS; the
module refuses to import otherwise.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from docket.engine.cases import CaseProfilePool
from docket.models.game import GameState
from docket.models.scenario import CaseProfile, Option


class Directive(str, Enum):
    """Closed set of directives the engine understands."""

    ASSIGN_CASE = "randomCase"
    BAIL_DECISION = "bailDecision"
    DEFENSE_VERDICT = "defenseVerdict"
    PROSECUTION_VERDICT = "prosecutionVerdict"
    MOTION_GRANTED = "motionGranted"

    @classmethod
    def parse(cls, value: str) -> "Directive | None":
        """Return the directive for a `next` value, or None for scene ids"""
        try:
            return cls(value)
        except ValueError:
            return None


# Designated target scenes
CASE_ASSIGNED_SCENE = "caseAssigned"
BAIL_OR_SCENE = "bailOR"
BAIL_CONDITIONS_SCENE = "bailConditions"
BAIL_BOND_SCENE = "bailBond"
DEFENSE_ACQUITTAL_SCENE = "verdictAcquittal"
DEFENSE_GUILTY_SCENE = "verdictGuilty"
PROSECUTION_GUILTY_SCENE = "prosecutionGuilty"
PROSECUTION_ACQUITTAL_SCENE = "prosecutionAcquittal"
MOTION_GRANTED_SCENE = "limineGranted"

MOTION_FLAG = "limineSuccess"

# Bail scoring
OR_HARM_LIMIT = 7
OR_HIGH_HARM_ADJUSTMENT = 5
OR_LOW_HARM_ADJUSTMENT = -2
ARGUMENT_ADJUSTMENTS = {"Conditions": -4, "Bond": 1}
OR_MAX_SCORE = 2
CONDITIONS_MAX_SCORE = 12

VERDICT_THRESHOLD = 5

# Scenes each directive can land on
DIRECTIVE_TARGETS: dict[Directive, tuple[str, ...]] = {
    Directive.ASSIGN_CASE: (CASE_ASSIGNED_SCENE,),
    Directive.BAIL_DECISION: (BAIL_OR_SCENE, BAIL_CONDITIONS_SCENE, BAIL_BOND_SCENE),
    Directive.DEFENSE_VERDICT: (DEFENSE_ACQUITTAL_SCENE, DEFENSE_GUILTY_SCENE),
    Directive.PROSECUTION_VERDICT: (
        PROSECUTION_GUILTY_SCENE,
        PROSECUTION_ACQUITTAL_SCENE,
    ),
    Directive.MOTION_GRANTED: (MOTION_GRANTED_SCENE,),
}

# Flags each directive sets
DIRECTIVE_FLAGS: dict[Directive, tuple[str, ...]] = {
    Directive.MOTION_GRANTED: (MOTION_FLAG,),
}


@dataclass
class Resolution:
    """Outcome of a resolver.

    Attributes:
        scene_id: The concrete target scene
        case: Case profile to make active (overwrites flight/harm)
        set_flags: Flags to set on the playthrough
    """

    scene_id: str
    case: CaseProfile | None = None
    set_flags: dict[str, bool] = field(default_factory=dict)


@dataclass
class ResolverContext:
    """Collaborators a resolver may need besides state and option."""

    cases: CaseProfilePool
    rng: random.Random


Resolver = Callable[[GameState, Option, ResolverContext], Resolution]


def bail_score(flight_risk: int, community_harm: int, argument: str | None) -> int:
    """Score a bail argument. Higher means a harsher release decision."""
    score = flight_risk + community_harm
    if argument == "OR":
        if community_harm > OR_HARM_LIMIT:
            score += OR_HIGH_HARM_ADJUSTMENT
        else:
            score += OR_LOW_HARM_ADJUSTMENT
    else:
        score += ARGUMENT_ADJUSTMENTS.get(argument or "", 0)
    return score


def bail_scene_for_score(score: int) -> str:
    if score <= OR_MAX_SCORE:
        return BAIL_OR_SCENE
    if score <= CONDITIONS_MAX_SCORE:
        return BAIL_CONDITIONS_SCENE
    return BAIL_BOND_SCENE


def resolve_case_assignment(
    state: GameState, option: Option, context: ResolverContext
) -> Resolution:
    return Resolution(
        scene_id=CASE_ASSIGNED_SCENE,
        case=context.cases.draw(context.rng),
    )


def resolve_bail_decision(
    state: GameState, option: Option, context: ResolverContext
) -> Resolution:
    score = bail_score(state.flight_risk, state.community_harm, option.argument)
    return Resolution(scene_id=bail_scene_for_score(score))


def resolve_defense_verdict(
    state: GameState, option: Option, context: ResolverContext
) -> Resolution:
    if state.professionalism >= VERDICT_THRESHOLD:
        return Resolution(scene_id=DEFENSE_ACQUITTAL_SCENE)
    return Resolution(scene_id=DEFENSE_GUILTY_SCENE)


def resolve_prosecution_verdict(
    state: GameState, option: Option, context: ResolverContext
) -> Resolution:
    if state.professionalism >= VERDICT_THRESHOLD:
        return Resolution(scene_id=PROSECUTION_GUILTY_SCENE)
    return Resolution(scene_id=PROSECUTION_ACQUITTAL_SCENE)


def resolve_motion_granted(
    state: GameState, option: Option, context: ResolverContext
) -> Resolution:
    return Resolution(scene_id=MOTION_GRANTED_SCENE, set_flags={MOTION_FLAG: True})


RESOLVERS: dict[Directive, Resolver] = {
    Directive.ASSIGN_CASE: resolve_case_assignment,
    Directive.BAIL_DECISION: resolve_bail_decision,
    Directive.DEFENSE_VERDICT: resolve_defense_verdict,
    Directive.PROSECUTION_VERDICT: resolve_prosecution_verdict,
    Directive.MOTION_GRANTED: resolve_motion_granted,
}

_unresolved = set(Directive) - set(RESOLVERS)
if _unresolved:
    raise RuntimeError(
        f"Directives without a resolver: {sorted(d.value for d in _unresolved)}"
    )


def resolve(
    directive: Directive,
    state: GameState,
    option: Option,
    context: ResolverContext,
) -> Resolution:
    """Run the resolver registered for a directive."""
    return RESOLVERS[directive](state, option, context)

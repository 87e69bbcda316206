"""
Narrative engine - drives one playthrough through a scenario graph.

The engine owns the GameState for its playthrough. Each call (start,
choose, restart) runs to completion and returns a TurnResult; nothing the
player sends can make it raise.

Transition order for choose():
    1. Reject options that are not currently offered (no-op)
    2. Apply the option's points to a working copy of the state
    3. Resolve `next`: literal scene id first, then directive
    4. Abort (no-op) if the resolved scene does not exist
    5. Commit: history step, resolver effects, first-entry risk factors,
       visited set, current scene, terminal check
    6. Hand a HistoryEntry to the dispatcher (fire-and-forget)
"""

from __future__ import annotations

import logging
import random

from docket.config import get_app_id
from docket.engine.cases import CaseProfilePool
from docket.engine.directives import (
    Directive,
    Resolution,
    ResolverContext,
    resolve,
)
from docket.engine.history import HistoryDispatcher, resolve_user_id
from docket.engine.renderer import render, substitute
from docket.engine.visibility import visible_options
from docket.models.game import (
    EngineStatus,
    GameState,
    HistoryEntry,
    HistoryStep,
    OptionView,
    TurnResult,
)
from docket.models.scenario import Option, Scene, ScenarioData

logger = logging.getLogger(__name__)


class NarrativeEngine:
    """Runs playthroughs of a single scenario.

    Attributes:
        scenario: Loaded scenario, or None if loading failed (engine stays idle)
        rng: Random source for case assignment
        dispatcher: Dispatcher for persisted history, or None to skip persistence
        user_id: Identity stamped on persisted entries
        app_id: App id stamped on persisted entries
        status: Current EngineStatus

    Example:
        >>> engine = NarrativeEngine(scenario, rng=random.Random(7))
        >>> turn = engine.start()
        >>> turn = engine.choose(engine.current_options()[0])
    """

    def __init__(
        self,
        scenario: ScenarioData | None,
        *,
        rng: random.Random | None = None,
        dispatcher: HistoryDispatcher | None = None,
        user_id: str | None = None,
        app_id: str | None = None,
    ):
        self.scenario = scenario
        self.rng = rng or random.Random()
        self.dispatcher = dispatcher
        self.user_id = resolve_user_id(user_id)
        self.app_id = app_id or get_app_id()
        self.status = EngineStatus.IDLE

        self._context = ResolverContext(
            cases=CaseProfilePool(scenario.cases if scenario else []),
            rng=self.rng,
        )
        self._state: GameState | None = None
        self._show_risk = False

    @property
    def ready(self) -> bool:
        """Whether a usable scenario is loaded"""
        return (
            self.scenario is not None
            and self.scenario.has_scene(self.scenario.scenario.start_scene)
        )

    @property
    def state(self) -> GameState | None:
        return self._state

    @property
    def current_scene(self) -> Scene | None:
        if self._state is None or self.scenario is None:
            return None
        return self.scenario.get_scene(self._state.current_scene_id)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> TurnResult:
        """Begin a fresh playthrough at the start scene.

        Callable at any time; always discards the previous GameState.
        """
        if not self.ready:
            logger.warning("Scenario not ready; engine stays idle")
            return self.view()

        self._state = GameState(current_scene_id=self.scenario.scenario.start_scene)
        self._show_risk = False
        self.status = EngineStatus.PLAYING
        logger.debug(f"Playthrough started at '{self._state.current_scene_id}'")
        return self.view(changed=True)

    def restart(self) -> TurnResult:
        """Discard the playthrough and start over."""
        return self.start()

    # -------------------------------------------------------------------------
    # Choices
    # -------------------------------------------------------------------------

    def current_options(self) -> list[Option]:
        """Options the player may pick right now."""
        scene = self.current_scene
        if self.status != EngineStatus.PLAYING or scene is None:
            return []
        return visible_options(scene.options, self._state.flags)

    def choose_index(self, index: int) -> TurnResult:
        """Choose by position in current_options(); out of range is a no-op."""
        options = self.current_options()
        if not 0 <= index < len(options):
            logger.warning(f"Ignoring choice index {index}; {len(options)} option(s) offered")
            return self.view()
        return self.choose(options[index])

    def choose(self, option: Option) -> TurnResult:
        """Apply a player choice.

        Args:
            option: One of current_options()

        Returns:
            TurnResult for the new scene, or for the unchanged current scene
            when the choice was stale or led nowhere
        """
        if self.status != EngineStatus.PLAYING:
            logger.debug(f"Ignoring choice while {self.status.value}")
            return self.view()

        if option not in self.current_options():
            logger.warning(f"Ignoring option not currently offered: {option.text!r}")
            return self.view()

        scene = self.current_scene
        working = self._state.model_copy(deep=True)
        if option.points is not None:
            working.add_points(option.accumulator, option.points)

        resolution = self._resolve(option, working)
        if resolution is None or not self.scenario.has_scene(resolution.scene_id):
            target = resolution.scene_id if resolution else option.next
            logger.warning(f"Choice leads to unknown scene '{target}'; nothing changes")
            return self.view()

        target_id = resolution.scene_id
        target = self.scenario.get_scene(target_id)
        scene_text = substitute(scene.text, working.active_case)

        working.history.append(HistoryStep(scene_text=scene_text, choice_text=option.text))

        if resolution.case is not None:
            working.active_case = resolution.case
            working.flight_risk = resolution.case.risk_factors.flight
            working.community_harm = resolution.case.risk_factors.harm
        working.flags.update(resolution.set_flags)

        apply_risk = (
            target_id not in working.visited_scene_ids
            and target.risk_factors is not None
        )
        if apply_risk:
            working.flight_risk += target.risk_factors.flight
            working.community_harm += target.risk_factors.harm
        working.visited_scene_ids.add(target_id)
        working.current_scene_id = target_id

        self._state = working
        self._show_risk = apply_risk
        if target.is_terminal:
            self.status = EngineStatus.TERMINAL

        logger.debug(
            f"'{self._state.history[-1].choice_text}' -> '{target_id}' "
            f"(flight={working.flight_risk}, harm={working.community_harm}, "
            f"professionalism={working.professionalism})"
        )

        self._record(scene_text, option.text)
        return self.view(changed=True)

    def _resolve(self, option: Option, state: GameState) -> Resolution | None:
        if self.scenario.has_scene(option.next):
            return Resolution(scene_id=option.next)

        directive = Directive.parse(option.next)
        if directive is None:
            return None

        try:
            return resolve(directive, state, option, self._context)
        except ValueError as e:
            logger.warning(f"Directive '{directive.value}' could not resolve: {e}")
            return None

    def _record(self, scene_text: str, choice_text: str) -> None:
        if self.dispatcher is None:
            return
        self.dispatcher.dispatch(HistoryEntry(
            scene_text=scene_text,
            choice_text=choice_text,
            user_id=self.user_id,
            app_id=self.app_id,
        ))

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def view(self, changed: bool = False) -> TurnResult:
        """Describe the current scene without changing anything."""
        scene = self.current_scene
        if self._state is None or scene is None:
            return TurnResult(status=self.status, ready=self.ready)

        state = self._state
        return TurnResult(
            status=self.status,
            ready=True,
            changed=changed,
            scene_id=state.current_scene_id,
            blocks=render(scene.text, state.active_case),
            options=[
                OptionView(index=i, text=option.text)
                for i, option in enumerate(self.current_options())
            ],
            ending=scene.ending,
            show_risk=self._show_risk and changed,
            flight_risk=state.flight_risk,
            community_harm=state.community_harm,
            professionalism=state.professionalism,
            case_name=state.active_case.name if state.active_case else None,
        )

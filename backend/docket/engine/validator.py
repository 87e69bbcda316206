"""
Scenario Validator - Validates consistency of YAML scenario definitions

Checks:
- Start scene exists
- Option targets: every `next` is a known scene or directive
- Directive targets: scenes a used directive can land on exist
- Scene ids do not shadow directive names
- Case pool is non-empty when case assignment is used
- Terminal scenes have no options, non-terminal scenes have some
- Gated scenes: every option is conditional (warnings)
- Orphan conditions: flags checked but never set (warnings)
"""

from dataclasses import dataclass, field

from docket.engine.directives import DIRECTIVE_FLAGS, DIRECTIVE_TARGETS, Directive
from docket.models.scenario import ScenarioData


@dataclass
class ValidationResult:
    """Result of scenario validation"""

    scenario_id: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Scenario is valid if there are no errors (warnings are OK)"""
        return len(self.errors) == 0

    def add_error(self, message: str):
        self.errors.append(message)

    def add_warning(self, message: str):
        self.warnings.append(message)


class ScenarioValidator:
    """Validates scenario definition consistency"""

    def __init__(self, scenario_data: ScenarioData, scenario_id: str):
        self.scenario_data = scenario_data
        self.scenario_id = scenario_id
        self.result = ValidationResult(scenario_id=scenario_id)

        self.directives_used: set[Directive] = set()
        self.flags_checked: dict[str, list[str]] = {}  # flag -> [options checking it]

    def validate(self) -> ValidationResult:
        """Run all validation checks"""
        self._validate_start_scene()
        self._validate_scene_ids()
        self._validate_options()
        self._validate_terminal_scenes()
        self._detect_gated_scenes()
        self._validate_directive_targets()
        self._validate_case_pool()
        self._detect_orphan_conditions()

        return self.result

    def _validate_start_scene(self):
        start = self.scenario_data.scenario.start_scene
        if not self.scenario_data.has_scene(start):
            self.result.add_error(f"Start scene '{start}' does not exist")

    def _validate_scene_ids(self):
        """Scene ids must not collide with directive names"""
        for scene_id in self.scenario_data.scenes:
            if Directive.parse(scene_id) is not None:
                self.result.add_error(
                    f"Scene id '{scene_id}' shadows a directive of the same name"
                )

    def _validate_options(self):
        """Every option must point at a scene or a known directive"""
        for scene_id, scene in self.scenario_data.scenes.items():
            for i, option in enumerate(scene.options):
                where = f"scene:{scene_id}/option:{i}"

                if option.condition:
                    self.flags_checked.setdefault(option.condition, []).append(where)

                if self.scenario_data.has_scene(option.next):
                    continue

                directive = Directive.parse(option.next)
                if directive is not None:
                    self.directives_used.add(directive)
                else:
                    self.result.add_error(
                        f"{where} leads to unknown scene or directive '{option.next}'"
                    )

    def _validate_terminal_scenes(self):
        for scene_id, scene in self.scenario_data.scenes.items():
            if scene.ending is not None and scene.options:
                self.result.add_error(
                    f"Scene '{scene_id}' has an ending but still lists {len(scene.options)} option(s)"
                )
            elif scene.ending is None and not scene.options:
                self.result.add_error(
                    f"Scene '{scene_id}' has no options and no ending (dead end)"
                )

    def _detect_gated_scenes(self):
        """Scenes whose options can all be hidden leave the player stuck"""
        for scene_id, scene in self.scenario_data.scenes.items():
            if scene.ending is None and scene.options and all(
                option.condition for option in scene.options
            ):
                self.result.add_warning(
                    f"Scene '{scene_id}' has only conditional options and may offer none"
                )

    def _validate_directive_targets(self):
        """Scenes a used directive can resolve to must exist"""
        for directive in sorted(self.directives_used, key=lambda d: d.value):
            for target in DIRECTIVE_TARGETS[directive]:
                if not self.scenario_data.has_scene(target):
                    self.result.add_error(
                        f"Directive '{directive.value}' can lead to missing scene '{target}'"
                    )

    def _validate_case_pool(self):
        if Directive.ASSIGN_CASE in self.directives_used and not self.scenario_data.cases:
            self.result.add_error(
                f"Directive '{Directive.ASSIGN_CASE.value}' is used but cases.yaml defines no profiles"
            )

    def _detect_orphan_conditions(self):
        """Conditions on flags that nothing in the scenario ever sets"""
        flags_set = set()
        for directive in self.directives_used:
            flags_set.update(DIRECTIVE_FLAGS.get(directive, ()))

        for flag, places in self.flags_checked.items():
            if flag not in flags_set:
                self.result.add_warning(
                    f"Flag '{flag}' is checked ({', '.join(places)}) but never set"
                )

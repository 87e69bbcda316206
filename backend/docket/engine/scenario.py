"""
Scenario loader - Load and validate YAML scenario files
"""

import logging
from pathlib import Path

import yaml

from docket.config import get_scenarios_dir
from docket.models.scenario import (
    CaseProfile,
    Ending,
    Option,
    RiskFactors,
    Scene,
    ScenarioData,
    ScenarioInfo,
)

logger = logging.getLogger(__name__)


class ScenarioLoader:
    """Loads scenarios from YAML files"""

    def __init__(self, scenarios_dir: str | Path | None = None):
        """Initialize with scenarios directory path"""
        if scenarios_dir is None:
            scenarios_dir = get_scenarios_dir()
        self.scenarios_dir = Path(scenarios_dir)

    def list_scenarios(self) -> list[dict]:
        """List available scenarios with metadata"""
        scenarios = []

        if not self.scenarios_dir.exists():
            return scenarios

        for scenario_path in sorted(self.scenarios_dir.iterdir()):
            scenario_yaml = scenario_path / "scenario.yaml"
            if not (scenario_path.is_dir() and scenario_yaml.exists()):
                continue
            try:
                with open(scenario_yaml, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Skipping unreadable scenario {scenario_path.name}: {e}")
                continue
            welcome = data.get("welcome", "")
            scenarios.append({
                "id": scenario_path.name,
                "title": data.get("title", scenario_path.name),
                "description": welcome[:200] + "..." if len(welcome) > 200 else welcome,
            })

        return scenarios

    def load_scenario(self, scenario_id: str, validate: bool = True) -> ScenarioData:
        """
        Load a complete scenario from YAML files.

        Args:
            scenario_id: The scenario identifier (folder name in scenarios/)
            validate: Whether to validate the scenario on load (default True)

        Returns:
            ScenarioData with all scenes and case profiles

        Raises:
            FileNotFoundError: If the scenario folder doesn't exist
            ValueError: If a file is malformed, or validation fails and validate=True
        """
        scenario_path = self.scenarios_dir / scenario_id

        if not scenario_path.is_dir():
            raise FileNotFoundError(f"Scenario '{scenario_id}' not found at {scenario_path}")

        try:
            info = self._load_scenario_yaml(scenario_path / "scenario.yaml")
            scenes = self._load_scenes_yaml(scenario_path / "scenes.yaml")
            cases = self._load_cases_yaml(scenario_path / "cases.yaml")
        except (yaml.YAMLError, AttributeError, TypeError) as e:
            raise ValueError(f"Scenario '{scenario_id}' is malformed: {e}") from e

        scenario_data = ScenarioData(scenario=info, scenes=scenes, cases=cases)

        if validate:
            from docket.engine.validator import ScenarioValidator
            result = ScenarioValidator(scenario_data, scenario_id).validate()

            for warning in result.warnings:
                logger.warning(f"Scenario '{scenario_id}': {warning}")

            if not result.is_valid:
                error_list = "\n  - ".join(result.errors)
                raise ValueError(
                    f"Scenario '{scenario_id}' validation failed with {len(result.errors)} error(s):\n  - {error_list}"
                )

        logger.info(
            f"Loaded scenario '{scenario_id}': {len(scenes)} scenes, {len(cases)} case profiles"
        )
        return scenario_data

    def _load_scenario_yaml(self, path: Path) -> ScenarioInfo:
        """Load scenario.yaml"""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return ScenarioInfo(
            title=data.get("title", path.parent.name),
            welcome=data.get("welcome", ""),
            start_scene=data.get("start_scene", "start"),
        )

    def _load_scenes_yaml(self, path: Path) -> dict[str, Scene]:
        """Load scenes.yaml"""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        scenes = {}
        for scene_id, scene_data in data.items():
            options = []
            for opt_data in scene_data.get("options", []) or []:
                options.append(Option(
                    text=opt_data.get("text", ""),
                    next=opt_data.get("next", ""),
                    condition=opt_data.get("condition"),
                    points=opt_data.get("points"),
                    accumulator=opt_data.get("accumulator", "professionalism"),
                    argument=opt_data.get("argument"),
                ))

            risk_factors = None
            risk_data = scene_data.get("risk_factors")
            if risk_data and isinstance(risk_data, dict):
                risk_factors = RiskFactors(
                    flight=risk_data.get("flight", 0),
                    harm=risk_data.get("harm", 0),
                )

            ending = None
            ending_data = scene_data.get("ending")
            if isinstance(ending_data, str):
                # Short form: just the message
                ending = Ending(message=ending_data)
            elif isinstance(ending_data, dict):
                ending = Ending(
                    message=ending_data.get("message", ""),
                    moral=ending_data.get("moral", ""),
                )

            scenes[str(scene_id)] = Scene(
                text=scene_data.get("text", ""),
                options=options,
                risk_factors=risk_factors,
                ending=ending,
            )

        return scenes

    def _load_cases_yaml(self, path: Path) -> list[CaseProfile]:
        """Load cases.yaml"""
        if not path.exists():
            return []

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or []

        cases = []
        for case_data in data:
            risk_data = case_data.get("risk_factors", {}) or {}
            cases.append(CaseProfile(
                name=case_data.get("name"),
                charge=case_data.get("charge"),
                history=case_data.get("history"),
                victim=case_data.get("victim"),
                incident=case_data.get("incident"),
                risk_factors=RiskFactors(
                    flight=risk_data.get("flight", 0),
                    harm=risk_data.get("harm", 0),
                ),
            ))

        return cases

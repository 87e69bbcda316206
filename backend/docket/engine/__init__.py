"""Narrative engine components.

- `narrative.py`: NarrativeEngine, owns a playthrough's GameState
- `directives.py`: Directive enum and the resolvers behind it
- `renderer.py`: placeholder substitution and paragraph/bold parsing
- `visibility.py`: option gating by flags
- `cases.py`: CaseProfilePool
- `scenario.py` / `validator.py`: YAML loading and consistency checks
- `history.py`: history recorders and the fire-and-forget dispatcher

Import directly from submodules:
    from docket.engine.narrative import NarrativeEngine
    from docket.engine.scenario import ScenarioLoader
"""

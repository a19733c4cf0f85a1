"""Content registry -- loads project data from JSON and serves lookups.

Project data is a single JSON document matching
:class:`~battlecore.ir.project_data.ProjectData`.  A small demo project
ships in ``data/demo/project.json``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from battlecore.ir.encounters import Encounter
from battlecore.ir.project_data import ProjectData

logger = logging.getLogger(__name__)

# Default paths relative to the project root.
_PROJECT_ROOT = Path(__file__).resolve().parents[4]  # src/battlecore/sim/content -> root
_DEFAULT_PROJECT_PATH = _PROJECT_ROOT / "data" / "demo" / "project.json"


class ContentRegistry:
    """Holds the loaded :class:`ProjectData` and resolves names to ids.

    Usage::

        registry = ContentRegistry()
        registry.load_project()

        encounter = registry.get_encounter("slime_pair")
        hero = registry.get_character_id("Hero")
    """

    def __init__(self, project: ProjectData | None = None) -> None:
        self.project = project or ProjectData()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_project(self, path: str | Path | None = None) -> ProjectData:
        """Load and validate project data from a JSON file.

        Parameters
        ----------
        path:
            Path to the JSON file.  Defaults to ``data/demo/project.json``
            relative to the project root.

        Raises
        ------
        pydantic.ValidationError
            If the document does not match the schema or holds dangling
            cross references.
        """
        if path is None:
            path = _DEFAULT_PROJECT_PATH
        path = Path(path)

        with open(path) as f:
            raw: dict[str, Any] = json.load(f)

        self.project = ProjectData.model_validate(raw)
        logger.debug(
            "Loaded %s: %d characters, %d enemies, %d skills, %d encounters",
            path.name,
            len(self.project.characters),
            len(self.project.enemies),
            len(self.project.skills),
            len(self.project.encounters),
        )
        return self.project

    def save_project(self, path: str | Path) -> None:
        """Write the current project data as indented JSON."""
        Path(path).write_text(self.project.model_dump_json(indent=2))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_encounter(self, name: str) -> Encounter:
        """Return the encounter called *name*.

        Raises ``KeyError`` if no encounter has that name.
        """
        for encounter in self.project.encounters:
            if encounter.name == name:
                return encounter
        raise KeyError(f"Unknown encounter {name!r}")

    def get_character_id(self, name: str) -> int:
        """Return the index of the character called *name*.

        Raises ``KeyError`` if no character has that name.
        """
        for i, character in enumerate(self.project.characters):
            if character.name == name:
                return i
        raise KeyError(f"Unknown character {name!r}")

    @property
    def encounter_names(self) -> list[str]:
        return [e.name for e in self.project.encounters]

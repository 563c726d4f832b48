"""Schema-validated exercise catalog loading.

The catalog is an ordered JSON array of exercise objects (camelCase keys,
as exported by the host app). Validation happens once, at load time, and
produces an immutable ExerciseCatalog; nothing downstream sees raw JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

from session_engine.exceptions import CatalogError
from session_engine.models.enums import Difficulty
from session_engine.models.exercise import ExerciseTemplate

logger = logging.getLogger(__name__)

_DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "exercise_templates.json"


@dataclass(frozen=True)
class ExerciseCatalog:
    """Frozen, ordered catalog. Iteration order is the suggestion tie-break order."""

    templates: tuple[ExerciseTemplate, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[ExerciseTemplate]:
        return iter(self.templates)

    def __len__(self) -> int:
        return len(self.templates)

    # -- Query helpers ----------------------------------------------------

    def get(self, template_id: str) -> ExerciseTemplate | None:
        for template in self.templates:
            if template.template_id == template_id:
                return template
        return None

    def by_muscle(self, muscle_group: str) -> tuple[ExerciseTemplate, ...]:
        """Templates hitting *muscle_group* as a primary or secondary muscle."""
        return tuple(t for t in self.templates if t.targets(muscle_group))

    def by_equipment(self, equipment: Iterable[str]) -> tuple[ExerciseTemplate, ...]:
        """Templates doable with *equipment* (bodyweight moves always are)."""
        available = tuple(equipment)
        return tuple(t for t in self.templates if t.usable_with(available))

    def search(self, query: str) -> tuple[ExerciseTemplate, ...]:
        """Case-insensitive substring match on the exercise name."""
        needle = query.lower()
        return tuple(t for t in self.templates if needle in t.name.lower())


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------


def _require_str(entry: dict, key: str, where: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise CatalogError(f"{where}: '{key}' must be a non-empty string")
    return value


def _str_tuple(entry: dict, key: str, where: str, required: bool = False) -> tuple[str, ...]:
    value = entry.get(key, [])
    if value is None:
        value = []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CatalogError(f"{where}: '{key}' must be a list of strings")
    if required and not value:
        raise CatalogError(f"{where}: '{key}' must not be empty")
    return tuple(value)


def _optional_int(entry: dict, key: str, where: str) -> int | None:
    value = entry.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise CatalogError(f"{where}: '{key}' must be a positive integer or null")
    return value


def _optional_difficulty(entry: dict, where: str) -> Difficulty | None:
    value = entry.get("difficulty")
    if value is None:
        return None
    try:
        return Difficulty[str(value).upper()]
    except KeyError:
        choices = ", ".join(d.name.lower() for d in Difficulty)
        raise CatalogError(f"{where}: 'difficulty' must be one of {choices}") from None


def parse_exercise_template(entry: Any, index: int = 0) -> ExerciseTemplate:
    """Validate one raw catalog entry and build an ExerciseTemplate."""
    if not isinstance(entry, dict):
        raise CatalogError(f"entry {index}: expected an object, got {type(entry).__name__}")
    template_id = str(entry.get("id", "")).strip()
    if not template_id:
        raise CatalogError(f"entry {index}: 'id' is required")
    where = f"entry {index} ({template_id})"

    rep_min = _optional_int(entry, "defaultRepMin", where)
    rep_max = _optional_int(entry, "defaultRepMax", where)
    if rep_min is not None and rep_max is not None and rep_min > rep_max:
        raise CatalogError(f"{where}: defaultRepMin {rep_min} exceeds defaultRepMax {rep_max}")

    pattern = entry.get("movementPattern")
    if pattern is not None and not isinstance(pattern, str):
        raise CatalogError(f"{where}: 'movementPattern' must be a string or null")

    return ExerciseTemplate(
        template_id=template_id,
        name=_require_str(entry, "name", where),
        primary_muscles=_str_tuple(entry, "primaryMuscles", where, required=True),
        secondary_muscles=_str_tuple(entry, "secondaryMuscles", where),
        equipment=_str_tuple(entry, "equipment", where, required=True),
        default_rep_min=rep_min,
        default_rep_max=rep_max,
        difficulty=_optional_difficulty(entry, where),
        movement_pattern=pattern or None,
    )


def parse_catalog(raw: Any) -> ExerciseCatalog:
    """Validate a decoded JSON catalog (a list of entries).

    Raises:
        CatalogError: on the first invalid entry, or on duplicate ids.
    """
    if not isinstance(raw, list):
        raise CatalogError(f"Catalog must be a JSON array, got {type(raw).__name__}")
    templates = tuple(parse_exercise_template(entry, i) for i, entry in enumerate(raw))

    seen: set[str] = set()
    for template in templates:
        if template.template_id in seen:
            raise CatalogError(f"Duplicate exercise id '{template.template_id}'")
        seen.add(template.template_id)

    return ExerciseCatalog(templates=templates)


def load_catalog(path: Path | str | None = None) -> ExerciseCatalog:
    """Load and validate a catalog file; defaults to the bundled sample catalog."""
    target = Path(path) if path else _DEFAULT_CATALOG_PATH
    try:
        with open(target, encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as exc:
        raise CatalogError(f"Could not read catalog {target}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog {target} is not valid JSON: {exc}") from exc
    catalog = parse_catalog(raw)
    logger.info("Loaded %d exercise templates from %s", len(catalog), target)
    return catalog

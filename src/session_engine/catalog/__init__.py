"""Exercise catalog: schema-validated loading and query helpers."""

from session_engine.catalog.loader import ExerciseCatalog, load_catalog, parse_catalog

__all__ = ["ExerciseCatalog", "load_catalog", "parse_catalog"]

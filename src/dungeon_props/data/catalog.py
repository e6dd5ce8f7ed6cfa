from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List

import yaml
from jsonschema import Draft7Validator

from ..dungeon.models import PropSpec
from ..exceptions import CatalogValidationError, ConfigurationError

logger = logging.getLogger(__name__)

_SCHEMA_PKG = "dungeon_props.data.schemas"
_SCHEMA_FILE = "prop_catalog.schema.json"


@lru_cache(maxsize=1)
def _load_schema() -> Dict[str, Any]:
    with resources.files(_SCHEMA_PKG).joinpath(_SCHEMA_FILE).open("rb") as fh:
        return json.load(fh)


def validate_catalog_dict(data: Any) -> None:
    """Validate a raw catalog document against the bundled JSON Schema.

    Raises:
        CatalogValidationError: listing every schema violation.
    """
    validator = Draft7Validator(_load_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        for err in errors:
            logger.error("Catalog schema error at %s: %s", list(err.path), err.message)
        raise CatalogValidationError("Prop catalog validation failed", errors)


def parse_catalog(data: Any) -> List[PropSpec]:
    """Turn a validated catalog document into PropSpec objects.

    Schema problems raise CatalogValidationError, inconsistent ranges
    (min > max) raise ConfigurationError from PropSpec itself.
    """
    validate_catalog_dict(data)
    specs = [PropSpec.from_dict(entry) for entry in data["props"]]
    names = [s.name for s in specs]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate prop names in catalog: {', '.join(duplicates)}")
    return specs


def load_catalog(path: os.PathLike | str) -> List[PropSpec]:
    """Load a catalog from a .yaml/.yml or .json file."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Prop catalog not found: {p}")
    with p.open("r", encoding="utf-8") as fh:
        if p.suffix.lower() == ".json":
            data = json.load(fh)
        else:
            data = yaml.safe_load(fh)
    specs = parse_catalog(data)
    logger.info("Loaded %d props from %s", len(specs), p)
    return specs


def default_catalog() -> List[PropSpec]:
    """The catalog bundled with the package."""
    text = resources.files("dungeon_props.data").joinpath("default_props.yaml").read_text(encoding="utf-8")
    return parse_catalog(yaml.safe_load(text))

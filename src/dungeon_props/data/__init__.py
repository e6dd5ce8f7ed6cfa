"""Prop catalog loading.

Catalogs are YAML or JSON documents validated against the bundled
``prop_catalog`` JSON Schema before being turned into PropSpec objects.
"""

from .catalog import default_catalog, load_catalog, parse_catalog

__all__ = [
    "default_catalog",
    "load_catalog",
    "parse_catalog",
]

"""insetmap layout engine: specs, configuration, placement and composition."""

from insetmap.engine.bbox import BoundingBox, features, fill_missing, union
from insetmap.engine.spec import SubplotSpec, inset_spec, main_spec, SizeMode
from insetmap.engine.configuration import (
    LayoutConfiguration,
    build_configuration,
    get_configuration_store,
    last_configuration,
)
from insetmap.engine.resolver import ResolvedLayout, resolve_layout
from insetmap.engine.compose import CompositionResult, compose
from insetmap.engine.sizing import compute_save_size
from insetmap.engine.errors import collect_advisories

__all__ = [
    "BoundingBox",
    "features",
    "fill_missing",
    "union",
    "SubplotSpec",
    "inset_spec",
    "main_spec",
    "SizeMode",
    "LayoutConfiguration",
    "build_configuration",
    "get_configuration_store",
    "last_configuration",
    "ResolvedLayout",
    "resolve_layout",
    "CompositionResult",
    "compose",
    "compute_save_size",
    "collect_advisories",
]

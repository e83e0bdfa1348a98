"""Composition orchestrator: render every subplot and place the insets.

Thin glue between the configuration, the resolver and a ``Renderer``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from insetmap.config import settings
from insetmap.engine.configuration import LayoutConfiguration, last_configuration
from insetmap.engine.errors import MissingRenderObjectError, RenderObjectMismatchError
from insetmap.engine.resolver import ResolvedLayout, resolve_layout

if TYPE_CHECKING:
    from insetmap.render.base import Renderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompositionResult:
    full: Any
    subplots: list[Any] = field(default_factory=list)
    layouts: list[ResolvedLayout] = field(default_factory=list)
    main_ratio: float = 1.0


def compose(
    render_object: Any = None,
    configuration: LayoutConfiguration | None = None,
    *,
    as_is: bool = False,
    return_details: bool = False,
    renderer: Renderer | None = None,
) -> Any:
    """Build the main plot with its insets.

    Args:
        render_object: Default payload for every subplot, or a list with one
            payload per spec (in spec order). A spec's own ``render_object``
            always takes precedence.
        configuration: Defaults to the last built configuration.
        as_is: Return ``render_object`` unchanged; no configuration needed.
        return_details: Return a ``CompositionResult`` instead of only the
            combined artifact.
        renderer: Rendering collaborator; defaults to ``MatplotlibRenderer()``.
    """
    if as_is:
        return render_object

    if configuration is None:
        configuration = last_configuration()

    if renderer is None:
        from insetmap.render.matplotlib_renderer import MatplotlibRenderer

        renderer = MatplotlibRenderer()

    payloads = _select_render_objects(render_object, configuration)

    subplots: list[Any] = []
    for resolved, payload in zip(configuration.specs, payloads):
        artifact = renderer.render(payload, resolved.plot_bbox, configuration.target_crs)
        if not resolved.is_main:
            artifact = renderer.apply_border(artifact, configuration.border_style)
        subplots.append(artifact)

    layouts = resolve_layout(configuration, margin=settings.inset_margin)
    main_artifact = subplots[configuration.main_index]
    inset_artifacts = [a for i, a in enumerate(subplots) if i != configuration.main_index]
    full = renderer.place(main_artifact, list(zip(inset_artifacts, layouts)))

    logger.info("Composed main plot with %d inset(s)", len(layouts))

    if return_details:
        return CompositionResult(
            full=full,
            subplots=subplots,
            layouts=layouts,
            main_ratio=configuration.main_ratio,
        )
    return full


def _select_render_objects(render_object: Any, configuration: LayoutConfiguration) -> list[Any]:
    n = len(configuration.specs)
    if isinstance(render_object, (list, tuple)):
        if len(render_object) != n:
            raise RenderObjectMismatchError(
                f"Expected {n} render objects (one per spec), got {len(render_object)}"
            )
        if any(obj is None for obj in render_object):
            raise RenderObjectMismatchError("Render object list must not contain None")
        defaults = list(render_object)
    else:
        defaults = [render_object] * n

    payloads = []
    for i, (resolved, default) in enumerate(zip(configuration.specs, defaults)):
        payload = resolved.spec.render_object if resolved.spec.render_object is not None else default
        if payload is None:
            raise MissingRenderObjectError(
                f"Spec {i} ({resolved.spec.label}) has no render object and no default was given"
            )
        payloads.append(payload)
    return payloads

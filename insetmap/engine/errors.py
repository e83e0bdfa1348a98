"""Error taxonomy and advisory warnings for the layout engine.

Configuration errors are caller mistakes and always fatal to the call.
Data errors depend on the spatial data at runtime. Advisories are non-fatal
and surface as ``InsetAdvisory`` warnings. Callers that need the messages
themselves (e.g. per HTTP request) use ``collect_advisories()``.
"""

from __future__ import annotations

import logging
import warnings
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator


class InsetMapError(ValueError):
    """Base class for every error raised by insetmap."""


# ── Configuration errors ──


class ConfigurationError(InsetMapError):
    pass


class InvertedBoundsError(ConfigurationError):
    pass


class InvalidPositionError(ConfigurationError):
    pass


class PositionOutOfRangeError(ConfigurationError):
    pass


class SizeOutOfRangeError(ConfigurationError):
    pass


class InvalidScaleFactorError(SizeOutOfRangeError):
    pass


class NoMainSpecError(ConfigurationError):
    pass


class MultipleMainSpecError(ConfigurationError):
    pass


class EmptySpecListError(ConfigurationError):
    pass


class InvalidRatioError(ConfigurationError):
    pass


class NoConfigurationError(ConfigurationError):
    pass


class MissingReferenceError(ConfigurationError):
    pass


class EmptyInputError(ConfigurationError):
    pass


class RenderObjectMismatchError(ConfigurationError):
    pass


class MissingRenderObjectError(ConfigurationError):
    pass


class MissingDimensionError(ConfigurationError):
    pass


class ProjectionError(ConfigurationError):
    pass


# ── Data errors ──


class DataError(InsetMapError):
    pass


class DegenerateExtentError(DataError):
    pass


# ── Advisories ──


class InsetAdvisory(UserWarning):
    """Non-fatal notice: execution continues with a deterministic fallback."""


_collected: ContextVar[list[str] | None] = ContextVar("insetmap_advisories", default=None)


@contextmanager
def collect_advisories() -> Iterator[list[str]]:
    """Record advisories emitted in the current context into the yielded list.

    Scoped per thread and per asyncio task, and independent of the global
    ``warnings`` filters.
    """
    messages: list[str] = []
    token = _collected.set(messages)
    try:
        yield messages
    finally:
        _collected.reset(token)


def advise(message: str, logger: logging.Logger | None = None) -> None:
    """Emit an advisory as a warning and mirror it to ``logger``."""
    if logger is not None:
        logger.warning(message)
    messages = _collected.get()
    if messages is not None:
        messages.append(message)
    warnings.warn(message, InsetAdvisory, stacklevel=3)

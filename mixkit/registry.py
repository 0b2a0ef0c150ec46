"""Registry of named segment factories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .common import ErrorCode, MixedError


@dataclass(frozen=True)
class SegmentEntry:
    """A registered segment: its name, argument descriptions and factory."""

    name: str
    args: tuple
    factory: Callable


_segments: dict = {}


def register_segment(name, args, factory):
    """Register ``factory`` under ``name`` taking arguments described by ``args``."""
    if name in _segments:
        raise MixedError(ErrorCode.DUPLICATE_SEGMENT)
    _segments[name] = SegmentEntry(name, tuple(args), factory)


def _lookup(name):
    try:
        return _segments[name]
    except KeyError:
        raise MixedError(ErrorCode.BAD_SEGMENT) from None


def deregister_segment(name):
    """Remove the segment registered under ``name``."""
    _lookup(name)
    del _segments[name]


def list_segments():
    """Return the names of all registered segments in registration order."""
    return list(_segments)


def segment_arguments(name):
    """Return the argument descriptions of the segment registered as ``name``."""
    return _lookup(name).args


def make_segment(name, *args):
    """Create a segment of the registered kind ``name`` from ``args``."""
    return _lookup(name).factory(*args)
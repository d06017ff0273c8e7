"""
Models package for beamerdown

Contains data structures and type definitions for the expansion pipeline.
"""

from .state import ProgramState, pipeline
from .builders import BuilderSpec, BuilderCategory, DEFAULT_BUILDER
from .frames import FrameMarker, BuilderArgs, FrameState
from .context import RunContext

__all__ = [
    "ProgramState",
    "pipeline",
    "BuilderSpec",
    "BuilderCategory",
    "DEFAULT_BUILDER",
    "FrameMarker",
    "BuilderArgs",
    "FrameState",
    "RunContext",
]

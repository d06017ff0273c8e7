"""
Builder specification and metadata models

Defines the structure and categories of frame builders for lookup,
documentation and registry management.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List


class BuilderCategory(Enum):
    """
    Categories of frame builders

    Used for organization and documentation.
    """
    FRAME = "frame"              # ---, ---default
    TITLE = "title"              # ---intro
    NAVIGATION = "navigation"    # ---contents
    FIGURE = "figure"            # ---image
    POSTER = "poster"            # ---h


@dataclass
class BuilderSpec:
    """
    Specification for a frame builder

    Defines metadata and handler for a builder resolved from a frame marker.
    Used by BuilderRegistry to manage available builders.

    Attributes:
        name: Builder name as written after the marker dashes
        category: Category for organization
        description: Human-readable description
        handler: Build function (args, is_open, context) -> List[str]
        examples: Example marker lines
        aliases: Alternative names for the builder
    """
    name: str
    category: BuilderCategory
    description: str
    handler: Callable
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)


# Builder used when a marker names none
DEFAULT_BUILDER: str = "default"

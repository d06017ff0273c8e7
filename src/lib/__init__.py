"""
beamerdown - Compact markup expander for beamer presentations

Expands indentation- and marker-based markup into LaTeX source.
"""

__version__ = "1.0.0"

from .assembler import Assembler, assemble
from .bibclean import BibCleaner, bibliography_clean
from .builders import BuilderRegistry
from .expander import Expander, expand
from .log import LOG, state_connectToLogger

__all__ = [
    "Assembler",
    "assemble",
    "BibCleaner",
    "bibliography_clean",
    "BuilderRegistry",
    "Expander",
    "expand",
    "LOG",
    "state_connectToLogger",
    "__version__",
]

"""
beamerdown - Compact markup expander for beamer presentations

Turns indentation- and marker-based markup for talks, posters and papers
into fully expanded LaTeX source.
"""

__version__ = "1.0.0"
__author__ = "Rudolph Pienaar"
__email__ = "rudolph.pienaar@gmail.com"

from .lib import (
    Assembler,
    assemble,
    BibCleaner,
    bibliography_clean,
    BuilderRegistry,
    Expander,
    expand,
    LOG,
    state_connectToLogger,
)

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

"""
Expansion pipeline

Chains the four text stages over one run context:

    code directives -> lists -> sections/frames -> highlights

Each stage consumes the previous stage's full text. The context (script
registers, column stacks, frame state, counters) is shared by the stages of
one run and must not be reused for another document.
"""

from functools import reduce
from typing import Callable, List, Optional

from ..models.context import RunContext
from .builders import BuilderRegistry
from .code import CodeExpander
from .frames import FrameExpander
from .lists import ListExpander
from .log import LOG
from .styles import StyleExpander


class Expander:
    """
    Runs the expansion stages in order

    Args:
        context: Fresh run context (default: a new non-poster context)
        registry: Builder registry for the frame stage
    """

    def __init__(self, context: Optional[RunContext] = None, registry: Optional[BuilderRegistry] = None) -> None:
        self.context = context if context is not None else RunContext.context_create()
        self.code = CodeExpander(self.context)
        self.lists = ListExpander(self.context)
        self.frames = FrameExpander(self.context, registry)
        self.styles = StyleExpander(self.context)

    def stages_get(self) -> List[Callable[[str], str]]:
        """Stage functions in execution order"""
        return [self.code.expand, self.lists.expand, self.frames.expand, self.styles.expand]

    def expand(self, text: str) -> str:
        """
        Expand compact markup into LaTeX.

        Args:
            text: Assembled document text

        Returns:
            Fully expanded LaTeX source
        """
        LOG(f"Expanding {len(text)} characters (poster mode: {self.context.posterMode})", level=2)
        return reduce(lambda source, stage: stage(source), self.stages_get(), text)


def expand(text: str, posterMode: bool = False) -> str:
    """Expand text with a fresh run context"""
    return Expander(RunContext.context_create(posterMode=posterMode)).expand(text)

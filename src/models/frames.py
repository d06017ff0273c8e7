"""
Frame expander data models

Type-safe structures for marker recognition, builder arguments and the
frame state machine.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class FrameMarker:
    """
    A recognized frame marker line

    Attributes:
        is_filter: True for `---|command` markers (gobble and pipe)
        name: Builder name, or the first word of a filter command line
              (None when the marker names nothing)
        rest: Text following the name (title, options, filter arguments)
        line: The full source line, for error reporting
        line_number: 1-based source line

    Example:
        "---image fig.png Results width=0.5" at line 7:
        FrameMarker(is_filter=False, name="image",
                    rest=" fig.png Results width=0.5", line=..., line_number=7)
    """
    is_filter: bool
    name: Optional[str]
    rest: str
    line: str
    line_number: int

    def bare_is(self) -> bool:
        """A bare marker (`---` alone) closes or toggles"""
        return not self.is_filter and self.name is None and not self.rest.strip()


@dataclass
class BuilderArgs:
    """
    Arguments captured from a builder marker

    Attributes:
        title: Positional text left after removing keyword options
        options: Keyword options in source order (key=value)
    """
    title: str = ""
    options: Dict[str, str] = field(default_factory=dict)


@dataclass
class FrameState:
    """
    State of the frame pass, reset once per document run

    Attributes:
        is_open: A builder block is open
        builder_name: Builder that opened the current block
        args: Arguments the open block was built with (reused on close)
        is_gobbling: Raw lines are being buffered for an external filter
        gobble_buffer: Buffered raw lines
        command: Shell command line of the pending filter
        pending_open: A bare marker arrived while closed; the next content
                      line opens an untitled default frame
    """
    is_open: bool = False
    builder_name: str = ""
    args: BuilderArgs = field(default_factory=BuilderArgs)
    is_gobbling: bool = False
    gobble_buffer: List[str] = field(default_factory=list)
    command: str = ""
    pending_open: bool = False

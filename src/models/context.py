"""
Per-run expansion context

A RunContext is created once per pipeline run and threaded through every
expansion stage. It owns all state that must survive from one line (or one
stage) to the next: the frame state machine, the poster column stacks, the
script namespace and the various counters.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .frames import FrameState

if TYPE_CHECKING:
    from ..config.settings import AppSettings


@dataclass
class RunContext:
    """
    Mutable state of one expansion run

    Attributes:
        settings: Configuration the stages read their constants from
        posterMode: Use the poster variants of list and highlight markup
        basePath: Directory external filters run in
        frame: Frame pass state machine
        columnBoxes: Column index -> names of the `h` boxes placed in it
        lastColumn: Column used by the most recent `h` box
        registers: Namespace shared by all script directives of the run
        imageCount: Number of filter blocks seen (image name counter)
        boxCount: Number of `h` boxes built (fallback box names)
        framesOpened: Builder invocations with is_open=True
        framesClosed: Builder invocations with is_open=False
    """

    settings: "AppSettings"
    posterMode: bool = False
    basePath: Path = field(default=Path("."))
    frame: FrameState = field(default_factory=FrameState)
    columnBoxes: Dict[int, List[str]] = field(default_factory=dict)
    lastColumn: Optional[int] = None
    registers: Dict[str, Any] = field(default_factory=dict)
    imageCount: int = 0
    boxCount: int = 0
    framesOpened: int = 0
    framesClosed: int = 0

    def __post_init__(self) -> None:
        self.registers.setdefault("poster", self.posterMode)
        self.registers.setdefault("columns", self.columnBoxes)

    @classmethod
    def context_create(
        cls,
        posterMode: bool = False,
        basePath: Optional[Path] = None,
        settings: Optional["AppSettings"] = None,
    ) -> "RunContext":
        """
        Build a fresh context for one run.

        Args:
            posterMode: Switch to the poster spacing/markup variants
            basePath: Working directory for external filters (default ".")
            settings: Settings to use (default: the appsettings singleton)

        Returns:
            RunContext with empty stacks and zeroed counters
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        return cls(
            settings=settings,
            posterMode=posterMode,
            basePath=Path(basePath) if basePath is not None else Path("."),
        )

    def frame_reset(self) -> None:
        """Start a new frame pass with a closed, non-gobbling state"""
        self.frame = FrameState()

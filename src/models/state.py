"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Optional, Type, TypeVar, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the expansion pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: basePath, inputFile, verbosity, mode flags
        - env_check: inputSourceFile, envOK
        - bib_clean: bibText
        - source_assemble: assembledText, assembledFile
        - source_expand: expandedText, expandedFile, frameCount
        - results_report: (no additions, terminal stage)

    Attributes:
        basePath: Directory the input file name is relative to
        inputFile: Input document (or .bib) file name
        verbosity: Logging verbosity level (1-3)
        bibclean: Run the bibliography normalizer
        assemble: Run the assembler
        expand: Run assembler and expansion stages
        posterMode: Poster spacing/markup variants
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input file
        bibText: Normalized bibliography text
        assembledText: Output of the assembler
        assembledFile: Where the assembled text was written
        expandedText: Output of the expansion stages
        expandedFile: Where the expanded text was written
        frameCount: Number of builder blocks opened during expansion
    """

    # CLI arguments
    basePath: Path = field(default=Path("."))
    inputFile: str = field(default="")
    verbosity: int = field(default=1)
    bibclean: bool = field(default=False)
    assemble: bool = field(default=False)
    expand: bool = field(default=False)
    posterMode: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    bibText: Optional[str] = field(default=None)
    assembledText: Optional[str] = field(default=None)
    assembledFile: Optional[Path] = field(default=None)
    expandedText: Optional[str] = field(default=None)
    expandedFile: Optional[Path] = field(default=None)
    frameCount: int = field(default=0)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace.

        Args:
            options: Parsed CLI arguments (inputFile, basePath, flags)

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        # Get the dictionary of all attributes from the Namespace
        options_dict = vars(options)

        # Get the set of valid field names for ProgramState
        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Filter options_dict to only include fields that exist in ProgramState
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}
        if "basePath" in filtered_options:
            filtered_options["basePath"] = Path(filtered_options["basePath"])

        # Instantiate the dataclass by unpacking the filtered dictionary.
        return cls(**filtered_options)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_assemble,
            source_expand,
            results_report
        )

    This is equivalent to:
        results_report(source_expand(source_assemble(env_check(initial_state))))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)

#!/usr/bin/env python3
"""
beamerdown - Compact markup expander for beamer presentations

Expands a compact, indentation- and marker-based markup for talks, posters
and papers into plain LaTeX (beamer) source, ready for the usual
pdflatex/bibtex round trip.

Philosophy:
    - Text-first: sources stay readable; markers replace boilerplate
    - Frames from markers: `--- Title` ... `---` instead of \\begin{frame}
    - Lists from indentation: `  * item`, `  # item`
    - Highlights inline: `~important~`

Usage:
    beamerdown talk.tex [--basePath DIR] [-b] [-a | -e] [-p] [-V]

    With none of -b/-a/-e, the bibliography is cleaned and the document is
    assembled and expanded to talk.expanded.tex.

Examples:
    # Full run
    beamerdown talk.tex

    # Only flatten \\input{} includes into talk.assembled
    beamerdown talk.tex --assemble

    # Poster with verbose output
    beamerdown poster.tex --expand --poster-mode -V
"""

import sys
from datetime import datetime
from pathlib import Path
from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from typing import List, Optional

from .lib import Assembler, BibCleaner, Expander, __version__, LOG, state_connectToLogger
from .lib.errors import BeamerdownError, MutuallyExclusiveOptionsError
from .models import ProgramState, RunContext, pipeline


DISPLAY_TITLE = r"""
  _                                      _
 | |__   ___  __ _ _ __ ___   ___ _ __ __| | _____      ___ __
 | '_ \ / _ \/ _` | '_ ` _ \ / _ \ '__/ _` |/ _ \ \ /\ / / '_ \
 | |_) |  __/ (_| | | | | | |  __/ | | (_| | (_) \ V  V /| | | |
 |_.__/ \___|\__,_|_| |_| |_|\___|_|  \__,_|\___/ \_/\_/ |_| |_|

  Compact markup expander for beamer
"""

# Define CLI arguments
parser = ArgumentParser(
    prog="beamerdown",
    description="beamerdown - Compact markup expander for beamer presentations",
    formatter_class=RawDescriptionHelpFormatter,
)

parser.add_argument("inputFile", type=str, help="Input document (.tex) or bibliography (.bib)")

parser.add_argument(
    "--basePath",
    default=".",
    type=str,
    help="Directory the input file is relative to (default: .)",
)

parser.add_argument("-b", "--bibclean", action="store_true", help="Normalize the referenced .bib file in place")

parser.add_argument("-a", "--assemble", action="store_true", help="Resolve \\input{} includes into <file>.assembled")

parser.add_argument(
    "-e",
    "--expand",
    action="store_true",
    help="Assemble and expand into <file>.expanded.tex (removes the .assembled intermediate)",
)

parser.add_argument(
    "-p",
    "--poster-mode",
    dest="posterMode",
    action="store_true",
    help="Use poster list and highlight spacing",
)

parser.add_argument(
    "-V",
    "--verbose",
    dest="verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -V, -VV)",
)

parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")


def options_resolve(options: Namespace) -> Namespace:
    """
    Validate flag combinations and apply the default mode.

    Args:
        options: Parsed CLI arguments

    Returns:
        The options with bibclean/assemble/expand all set when none was given

    Raises:
        MutuallyExclusiveOptionsError: If both --assemble and --expand are given
    """
    if options.assemble and options.expand:
        raise MutuallyExclusiveOptionsError("--assemble and --expand are mutually exclusive")
    if not (options.bibclean or options.assemble or options.expand):
        options.bibclean = True
        options.expand = True
    return options


def output_path(state: ProgramState, suffix: str) -> Path:
    """Output file next to the input: <stem><suffix>"""
    source = state.inputSourceFile
    return source.with_name(source.stem + suffix)


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the input file.

    Returns:
        ProgramState with inputSourceFile and envOK set

    Exits:
        1 if the input file does not exist
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)
    LOG(f"Started {datetime.now().isoformat(timespec='seconds')}", level=2)
    for name in ("basePath", "inputFile", "bibclean", "assemble", "expand", "posterMode"):
        LOG(f"  {name}: {getattr(state, name)}", level=2)

    input_file = state.basePath / state.inputFile
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    state.envOK = True
    return state


def bib_clean(inputstate: ProgramState) -> ProgramState:
    """
    Normalize the bibliography referenced by the input file.

    Returns:
        ProgramState with bibText set (when bibclean was requested)

    Exits:
        1 if the bibliography cannot be found or read
    """
    state = inputstate.copy()
    if not state.bibclean:
        return state

    LOG("Cleaning bibliography...", level=1)
    try:
        state.bibText = BibCleaner().bibliography_clean(state.basePath, state.inputFile)
    except BeamerdownError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def source_assemble(inputstate: ProgramState) -> ProgramState:
    """
    Resolve includes and write <stem>.assembled.

    Returns:
        ProgramState with assembledText and assembledFile set

    Exits:
        1 if the input or an included file is missing or unreadable
    """
    state = inputstate.copy()
    if not (state.assemble or state.expand):
        return state

    LOG("Assembling includes...", level=1)
    try:
        state.assembledText = Assembler().assemble(state.basePath, state.inputFile)
    except BeamerdownError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    state.assembledFile = output_path(state, ".assembled")
    state.assembledFile.write_text(state.assembledText, encoding="utf-8")
    LOG(f"Wrote {state.assembledFile}", level=2)
    return state


def source_expand(inputstate: ProgramState) -> ProgramState:
    """
    Run the expansion stages and write <stem>.expanded.tex.

    The .assembled intermediate is removed once the expanded file is written.

    Returns:
        ProgramState with expandedText, expandedFile and frameCount set

    Exits:
        1 on any expansion error
    """
    state = inputstate.copy()
    if not state.expand:
        return state

    LOG("Expanding markup...", level=1)
    context = RunContext.context_create(
        posterMode=state.posterMode,
        basePath=state.inputSourceFile.parent,
    )
    try:
        state.expandedText = Expander(context).expand(state.assembledText or "")
    except BeamerdownError as e:
        print(f"Expansion error: {e}", file=sys.stderr)
        sys.exit(1)

    state.frameCount = context.framesOpened
    state.expandedFile = output_path(state, ".expanded.tex")
    state.expandedFile.write_text(state.expandedText, encoding="utf-8")
    LOG(f"Wrote {state.expandedFile}", level=2)

    if state.assembledFile is not None and state.assembledFile.exists():
        state.assembledFile.unlink()
        LOG(f"Removed {state.assembledFile}", level=2)
        state.assembledFile = None
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display run results.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()

    LOG("✓ Done", level=1)
    if state.bibText is not None:
        LOG("  Bibliography cleaned", level=1)
    if state.assembledFile is not None:
        LOG(f"  Assembled: {state.assembledFile}", level=1)
    if state.expandedFile is not None:
        LOG(f"  Expanded: {state.expandedFile} ({state.frameCount} blocks)", level=1)
    LOG(f"Finished {datetime.now().isoformat(timespec='seconds')}", level=2)
    return state


def main(argv: Optional[List[str]] = None) -> ProgramState:
    """
    Main entry point - clean, assemble and expand one document.

    Orchestrates the pipeline:
        1. env_check: Validate the input file
        2. bib_clean: Normalize the bibliography (-b)
        3. source_assemble: Resolve includes (-a, -e)
        4. source_expand: Expand markup (-e)
        5. results_report: Display results

    Args:
        argv: Argument list (default: sys.argv[1:])

    Returns:
        Final ProgramState
    """
    options = parser.parse_args(argv)
    try:
        options = options_resolve(options)
    except MutuallyExclusiveOptionsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    state: ProgramState = ProgramState.state_createFromNamespace(options=options)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    return pipeline(state, env_check, bib_clean, source_assemble, source_expand, results_report)


def cli() -> None:
    """Console script entry point (discards the final state)"""
    main()


if __name__ == "__main__":
    cli()

"""
Frame/section expander

Turns compact section and frame markers into beamer structure.

Section markers:
    ---===[Short] Long frame title

become a \\section{Short}, a subsection step and a reopened frame titled
"Long frame title" (closing the frame that was open, if any).

Frame markers:
    --- Title                a default frame
    ---image fig.pdf Title   a named builder (attached to the dashes)
    --- image fig.pdf Title  same, when the name is lowercase and has arguments
                             (so a lowercase multi-word title such as
                             `--- results and discussion` names the builder
                             "results"; capitalize it or use `---default`)
    ---|dot -Tpdf            a filter: raw lines up to the next marker are
                             piped through the shell command
    ---                      close (or, while closed, open an untitled frame
                             at the next content line)

Keyword options (key=value, key="a b", key={a b}) are separated from the
title and handed to the builder.
"""

import re
import subprocess
from typing import List, Optional

from ..models.builders import DEFAULT_BUILDER
from ..models.context import RunContext
from ..models.frames import BuilderArgs, FrameMarker
from .builders import BuilderRegistry
from .errors import FilterError, UnclosedStructureError, UnknownBuilderError
from .log import LOG, WARN


MARKER_LINE = re.compile(r'^---(?P<filter>\|)?(?P<body>.*)$')
ATTACHED_NAME = re.compile(r'^(?P<name>[a-z]\w*)(?=\s|$)(?P<rest>.*)$')
SPACED_NAME = re.compile(r'^[ \t]+(?P<name>[a-z]\w*)(?P<rest>[ \t]+\S.*)$')
SECTION_LINE = re.compile(r'^---===[ \t]*(?:\[(?P<title>[^\]]*)\])?[ \t]*(?P<text>.*?)\s*$')
OPTION = re.compile(
    r'(?:^|(?<=\s))(?P<key>[a-z][\w-]*)='
    r'(?:"(?P<quoted>[^"]*)"|\{(?P<braced>[^{}]*)\}|(?P<value>\S*))'
)


def marker_parse(line: str, line_number: int = 0) -> Optional[FrameMarker]:
    """
    Recognize a frame marker line.

    Args:
        line: Source line
        line_number: 1-based line number (for error reporting)

    Returns:
        FrameMarker, or None if the line is not a marker

    Example:
        >>> marker_parse("---image fig.png Results").name
        'image'
        >>> marker_parse("--- My Title").name is None
        True
    """
    match = MARKER_LINE.match(line)
    if not match:
        return None
    body = match.group("body")

    if match.group("filter"):
        command = body.strip()
        name = command.split(None, 1)[0] if command else None
        return FrameMarker(is_filter=True, name=name, rest=command, line=line, line_number=line_number)

    named = ATTACHED_NAME.match(body) or SPACED_NAME.match(body)
    if named:
        return FrameMarker(
            is_filter=False, name=named.group("name"), rest=named.group("rest"),
            line=line, line_number=line_number,
        )
    return FrameMarker(is_filter=False, name=None, rest=body, line=line, line_number=line_number)


def args_parse(rest: str) -> BuilderArgs:
    """
    Split marker arguments into keyword options and a title.

    Example:
        >>> args_parse(' Results column=1 draw="thick blue"')
        BuilderArgs(title='Results', options={'column': '1', 'draw': 'thick blue'})
    """
    options = {}
    for match in OPTION.finditer(rest):
        value = match.group("quoted")
        if value is None:
            value = match.group("braced")
        if value is None:
            value = match.group("value")
        options[match.group("key")] = value
    title = " ".join(OPTION.sub("", rest).split())
    return BuilderArgs(title=title, options=options)


class FrameExpander:
    """
    Section pass followed by the frame state machine

    Args:
        context: Run context (frame state, counters, settings)
        registry: Builder registry (default: the built-in builders)
    """

    def __init__(self, context: RunContext, registry: Optional[BuilderRegistry] = None) -> None:
        self.context = context
        self.settings = context.settings
        self.registry = registry if registry is not None else BuilderRegistry()

    def sections_expand(self, text: str) -> str:
        """
        Replace section markers with a section heading and a reopened frame.

        Args:
            text: Full document text

        Returns:
            Text in which every section marker became plain frame markers
        """
        result: List[str] = []
        is_open = False
        pending = False

        for line_number, line in enumerate(text.split("\n"), start=1):
            section = SECTION_LINE.match(line)
            if section:
                explicit = section.group("title")
                free = section.group("text")
                heading = explicit if explicit is not None else free
                frame_title = free or explicit or ""

                if is_open:
                    result.append("---")
                result.extend([
                    "",
                    f"\\section{{{heading}}}",
                    "\\stepcounter{subsection}",
                    "",
                    f"---{DEFAULT_BUILDER} {frame_title}".rstrip(),
                ])
                LOG(f"Section '{heading}' at line {line_number}", level=3)
                is_open = True
                pending = False
                continue

            marker = marker_parse(line, line_number)
            if marker is not None:
                if not marker.bare_is():
                    is_open, pending = True, False
                elif is_open:
                    is_open = False
                else:
                    pending = True
            elif pending and line.strip():
                is_open, pending = True, False
            result.append(line)

        return "\n".join(result)

    def block_open(self, name: str, args: BuilderArgs, marker: Optional[FrameMarker] = None) -> List[str]:
        """Invoke a builder with is_open=True and record it in the frame state"""
        spec = self.registry.get(name)
        if spec is None:
            raise UnknownBuilderError(
                name,
                marker.line if marker else "",
                marker.line_number if marker else None,
            )
        lines = spec.handler(args, True, self.context)

        state = self.context.frame
        state.is_open = True
        state.builder_name = name
        state.args = args
        self.context.framesOpened += 1
        return lines

    def block_close(self) -> List[str]:
        """Invoke the open block's builder with is_open=False"""
        state = self.context.frame
        spec = self.registry.get(state.builder_name)
        lines = spec.handler(state.args, False, self.context)
        state.is_open = False
        self.context.framesClosed += 1
        return lines

    def gobble_start(self, marker: FrameMarker) -> None:
        """Begin buffering raw lines for an external filter"""
        self.context.imageCount += 1
        image = self.settings.imageName_make(self.context.imageCount)
        command = marker.rest or self.settings.filter_default_command

        state = self.context.frame
        state.is_gobbling = True
        state.gobble_buffer = []
        state.command = command.replace("{image}", image)

    def filter_flush(self) -> List[str]:
        """
        Pipe the gobbled lines through the filter command.

        Returns:
            The filter's combined stdout/stderr, as lines

        Raises:
            FilterError: If the command cannot be started or times out
        """
        state = self.context.frame
        command = state.command
        stdin = "\n".join(state.gobble_buffer)
        if state.gobble_buffer:
            stdin += "\n"
        LOG(f"Filtering {len(state.gobble_buffer)} lines through: {command}", level=2)

        try:
            completed = subprocess.run(
                command,
                shell=True,
                input=stdin,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                cwd=str(self.context.basePath),
                timeout=self.settings.filter_timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise FilterError(f"filter timed out after {self.settings.filter_timeout}s: {command}") from e
        except OSError as e:
            raise FilterError(f"filter could not run: {command}: {e}") from e

        if completed.returncode != 0:
            WARN(f"filter exited with status {completed.returncode}: {command}")

        state.is_gobbling = False
        state.gobble_buffer = []
        state.command = ""

        output = completed.stdout.rstrip("\n")
        return output.split("\n") if output else []

    def frames_expand(self, text: str) -> str:
        """
        Run the frame state machine over text.

        Args:
            text: Text after the section pass

        Returns:
            Text with frame markers replaced by builder output

        Raises:
            UnknownBuilderError: If a marker names an unregistered builder
            UnclosedStructureError: If a frame is still open at end of input
            FilterError: If an external filter fails to run
        """
        self.context.frame_reset()
        state = self.context.frame
        indent = self.settings.frame_indent
        result: List[str] = []
        lines = text.split("\n")

        for line_number, line in enumerate(lines, start=1):
            marker = marker_parse(line, line_number)

            if marker is None:
                if state.is_gobbling:
                    state.gobble_buffer.append(line)
                    continue
                if state.pending_open and line.strip():
                    state.pending_open = False
                    result.extend(self.block_open(DEFAULT_BUILDER, BuilderArgs()))
                if state.is_open and line.strip():
                    result.append(indent + line)
                else:
                    result.append(line)
                continue

            state.pending_open = False
            if state.is_gobbling:
                result.extend(self.filter_flush())
                if marker.bare_is():
                    continue
            elif state.is_open:
                result.extend(self.block_close())
                if marker.bare_is():
                    continue
                # Chained marker: the next block follows after one empty line
                result.append("")
            elif marker.bare_is():
                state.pending_open = True
                continue

            if marker.is_filter:
                self.gobble_start(marker)
            else:
                result.extend(self.block_open(marker.name or DEFAULT_BUILDER, args_parse(marker.rest), marker))

        if state.is_gobbling:
            result.extend(self.filter_flush())
        if state.is_open:
            raise UnclosedStructureError("frames not closed at end of input", len(lines))

        LOG(f"Built {self.context.framesOpened} blocks", level=3)
        return "\n".join(result)

    def expand(self, text: str) -> str:
        """Section pass, then frame pass"""
        return self.frames_expand(self.sections_expand(text))

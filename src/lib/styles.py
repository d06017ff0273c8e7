"""
Style expander

Expands inline highlight spans into coloured boxes:

    ~text~                 -> \\vspace{2pt}\\colorbox{yellow!30}{text}\\vspace{2pt}
    ~text~{1em,-3pt}       -> \\vspace{1em}\\colorbox{yellow!30}{text}\\vspace{-3pt}

Spans are replaced one at a time; after every replacement the whole line is
scanned again, so adjacent spans are all found. A tilde preceded by a
backslash is never a span delimiter.
"""

import re
from typing import List, Optional, Tuple

from ..models.context import RunContext
from .log import LOG


SPACED_SPAN = re.compile(
    r'(?<!\\)~(?P<text>[^~]+?)(?<!\\)~\{(?P<before>[^{},]*),(?P<after>[^{},]*)\}'
)
BARE_SPAN = re.compile(r'(?<!\\)~(?P<text>[^~]+?)(?<!\\)~')


class StyleExpander:
    """Ordered span matchers applied until a line has no span left"""

    def __init__(self, context: RunContext) -> None:
        self.context = context
        self.settings = context.settings
        self.spans = 0

    def box_make(self, text: str, before: str, after: str) -> str:
        """Coloured box wrapper with vertical space around it"""
        return f"\\vspace{{{before}}}\\colorbox{{{self.settings.highlight_color}}}{{{text}}}\\vspace{{{after}}}"

    def spacing_get(self, bare_count: int) -> Tuple[str, str]:
        """(before, after) spacing of the bare_count-th bare span on a line (1-based)"""
        before = self.settings.highlight_space
        if self.context.posterMode:
            before = self.settings.poster_highlight_space_before
        after = self.settings.highlight_space if bare_count == 1 else self.settings.highlight_space_repeat
        return before, after

    def span_replace(self, line: str, bare_count: int) -> Optional[Tuple[str, bool]]:
        """
        Replace the first span of the highest-priority matcher that applies.

        Returns:
            (new line, was_bare) or None if the line holds no span
        """
        match = SPACED_SPAN.search(line)
        if match:
            box = self.box_make(match.group("text"), match.group("before").strip(), match.group("after").strip())
            return line[:match.start()] + box + line[match.end():], False

        match = BARE_SPAN.search(line)
        if match:
            before, after = self.spacing_get(bare_count + 1)
            box = self.box_make(match.group("text"), before, after)
            return line[:match.start()] + box + line[match.end():], True

        return None

    def line_expand(self, line: str) -> str:
        """Expand every highlight span on one line"""
        bare_count = 0
        while True:
            replaced = self.span_replace(line, bare_count)
            if replaced is None:
                return line
            line, was_bare = replaced
            self.spans += 1
            if was_bare:
                bare_count += 1

    def expand(self, text: str) -> str:
        """
        Expand highlight spans in every line of text.

        Args:
            text: Full document text

        Returns:
            Text without unescaped ~span~ markup
        """
        lines: List[str] = [self.line_expand(line) for line in text.split("\n")]
        LOG(f"Expanded {self.spans} highlight spans", level=3)
        return "\n".join(lines)

"""
List expander

Turns indented bullet lines into nested LaTeX list environments:

      * first            \\begin{itemize}
      * second             \\item first
        # sub      -->     \\item second
                           \\begin{enumerate}
                           ...

A bullet line is leading whitespace, `*` (itemize) or `#` (enumerate),
whitespace, then the item text. Deeper indentation opens one nesting,
shallower indentation closes one nesting per indentation step. The first
plain line after a list closes everything still open and adds a small
vertical space.

Each indentation step is `list_indent_step` columns (2 by default). Sources
nested by 4 columns close two levels per dedent and fail with an
inconsistent-indentation error; set BEAMERDOWN_LIST_INDENT_STEP=4 for them.
"""

import re
from typing import List, Tuple

from ..models.context import RunContext
from .errors import UnclosedStructureError
from .log import LOG


BULLET_LINE = re.compile(r'^(?P<indent>[ \t]+)(?P<marker>[*#])[ \t]+(?P<rest>.*)$')

BULLET_KINDS = {
    "*": "itemize",
    "#": "enumerate",
}


class ListExpander:
    """
    Single forward pass over the document with a nesting stack

    Attributes:
        stack: Open nestings, innermost last ('itemize', 'enumerate', 'list')
        indent: Indentation of the last bullet line (0 when no list is open)
        opened: Number of list environments opened
        closed: Number of list environments closed
    """

    def __init__(self, context: RunContext) -> None:
        self.context = context
        self.settings = context.settings
        self.stack: List[str] = []
        self.indent = 0
        self.opened = 0
        self.closed = 0

    def kind_resolve(self, marker: str) -> str:
        """Nesting kind for a bullet marker (itemize becomes list in poster mode)"""
        kind = BULLET_KINDS[marker]
        if kind == "itemize" and self.context.posterMode:
            return "list"
        return kind

    def nesting_open(self, kind: str, indent: str) -> str:
        """Opening markup of a nesting"""
        self.stack.append(kind)
        self.opened += 1
        if kind != "list":
            return f"{indent}\\begin{{{kind}}}"

        spacing = f"\\setlength{{\\leftmargin}}{{{self.settings.poster_list_leftmargin}}}"
        if self.settings.poster_list_compact:
            spacing += "\\setlength{\\itemsep}{0pt}\\setlength{\\parsep}{0pt}"
        return f"{indent}\\begin{{list}}{{\\textbullet}}{{{spacing}}}"

    def nesting_close(self, line_number: int) -> str:
        """Closing markup of the innermost nesting"""
        if not self.stack:
            raise UnclosedStructureError("list closed with no list open", line_number)
        kind = self.stack.pop()
        self.closed += 1
        line = f"{' ' * self.indent}\\end{{{kind}}}"
        self.indent = max(0, self.indent - self.settings.list_indent_step)
        return line

    def bullet_expand(self, match: re.Match, line_number: int) -> List[str]:
        """Nesting changes and the item for one bullet line"""
        out: List[str] = []
        indent_text = match.group("indent")
        indent = len(indent_text)

        if indent > self.indent:
            out.append(self.nesting_open(self.kind_resolve(match.group("marker")), indent_text))
        elif indent < self.indent:
            steps = max(1, (self.indent - indent) // self.settings.list_indent_step)
            for _ in range(steps):
                out.append(self.nesting_close(line_number))
            if not self.stack:
                raise UnclosedStructureError(
                    "inconsistent list indentation: bullet outside any open list", line_number
                )

        self.indent = indent
        out.append(f"{indent_text}\\item {match.group('rest')}")
        return out

    def stack_unwind(self, line_number: int) -> List[str]:
        """Close every open nesting before a plain line"""
        out: List[str] = []
        while self.stack:
            out.append(self.nesting_close(line_number))
        out.append(f"\\vspace{{{self.settings.list_close_vspace}}}")
        self.indent = 0
        return out

    def expand(self, text: str) -> str:
        """
        Expand every bullet block in text.

        Args:
            text: Full document text

        Returns:
            Text with bullet lines turned into list environments

        Raises:
            UnclosedStructureError: On inconsistent indentation or a list
                                    still open at end of input
        """
        result: List[str] = []
        lines = text.split("\n")

        for line_number, line in enumerate(lines, start=1):
            match = BULLET_LINE.match(line)
            if match:
                result.extend(self.bullet_expand(match, line_number))
                continue

            if self.stack:
                result.extend(self.stack_unwind(line_number))
            elif self.indent:
                raise UnclosedStructureError(
                    "inconsistent list indentation: closing with no list open", line_number
                )
            result.append(line)

        if self.stack:
            raise UnclosedStructureError(
                f"{len(self.stack)} list(s) still open at end of input", len(lines)
            )

        LOG(f"Expanded {self.opened} list environments", level=3)
        return "\n".join(result)

    def balance_get(self) -> Tuple[int, int]:
        """(opened, closed) list environment counts"""
        return self.opened, self.closed

"""
Code expander

Runs the script directives embedded in a document:

    %! slide = 1            (run, line removed)
    %! slide += 1
    %!= f"Slide {slide}"    (line replaced by the result)

Directives must start at column 0. All directives of one run share the
context's register namespace.
"""

import re
from typing import List

from ..models.context import RunContext
from .log import LOG
from .script import ScriptEngine


class CodeExpander:
    """Executes script directives line by line"""

    def __init__(self, context: RunContext) -> None:
        settings = context.settings
        self.context = context
        self.engine = ScriptEngine(context.registers)
        self.directive = re.compile(
            r'^' + re.escape(settings.code_marker)
            + r'(?P<replace>' + re.escape(settings.code_replace_flag) + r')?'
            + r'[ \t]+(?P<script>.*?)\s*$'
        )

    def expand(self, text: str) -> str:
        """
        Execute every directive in text.

        Args:
            text: Full document text

        Returns:
            Text with directive lines removed or replaced by their results

        Raises:
            ScriptError: If a directive is rejected or fails
        """
        result: List[str] = []
        count = 0

        for line_number, line in enumerate(text.split("\n"), start=1):
            match = self.directive.match(line)
            if not match:
                result.append(line)
                continue

            count += 1
            script = match.group("script")
            if match.group("replace"):
                value = self.engine.expression_evaluate(script, line_number)
                result.append(str(value))
            else:
                self.engine.statement_run(script, line_number)

        LOG(f"Ran {count} script directives", level=3)
        return "\n".join(result)

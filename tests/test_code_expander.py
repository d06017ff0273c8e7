"""
Code expander and script engine tests

Tests run/replace directives, namespace persistence across directives,
and rejection of constructs outside the allowed subset.
"""

import pytest

from beamerdown.lib.code import CodeExpander
from beamerdown.lib.errors import ScriptError
from beamerdown.lib.script import ScriptEngine


class TestDirectives:
    """Run and replace directives"""

    def test_run_directive_removed(self, context):
        """A run directive executes and its line disappears"""
        out = CodeExpander(context).expand("a\n%! n = 1\nb")
        assert out == "a\nb"
        assert context.registers["n"] == 1

    def test_replace_directive(self, context):
        """A replace directive is substituted by its stringified result"""
        out = CodeExpander(context).expand("%!= 6 * 7")
        assert out == "42"

    def test_state_persists_between_directives(self, context):
        """Later directives read state set by earlier ones"""
        source = "%! slide = 0\n%! slide += 1\n%! slide += 1\nSlide %!\n%!= f'Slide {slide}'"
        out = CodeExpander(context).expand(source)
        assert out == "Slide %!\nSlide 2"

    def test_state_persists_across_expanders_of_one_context(self, context):
        """The register namespace belongs to the run context"""
        CodeExpander(context).expand("%! total = 5")
        assert CodeExpander(context).expand("%!= total + 1") == "6"

    def test_marker_not_at_line_start_ignored(self, context):
        """Directives only count at column 0"""
        source = "  %! n = 1\ntext %!= 1"
        assert CodeExpander(context).expand(source) == source

    def test_poster_flag_visible(self, poster_context):
        """Scripts can read the poster flag"""
        assert CodeExpander(poster_context).expand("%!= 'poster' if poster else 'talk'") == "poster"

    def test_columns_visible(self, context):
        """Scripts can read the poster column stacks"""
        context.columnBoxes[0] = ["intro"]
        assert CodeExpander(context).expand("%!= columns[0][-1]") == "intro"

    def test_loops_and_conditionals(self, context):
        """for/if statements run in the namespace"""
        source = "%! total = 0\n%! for i in range(4): total += i\n%!= total"
        assert CodeExpander(context).expand(source) == "6"

    def test_error_reports_line(self, context):
        """Runtime failures surface as ScriptError with the line number"""
        with pytest.raises(ScriptError, match="line 2"):
            CodeExpander(context).expand("ok\n%!= undefined_name")


class TestScriptEngine:
    """Allow-list enforcement"""

    @pytest.mark.parametrize("source", [
        "import os",
        "open('x')",
        "().__class__",
        "__import__('os')",
        "lambda: 1",
        "[x for x in range(3)]",
        "'a'.upper()",
    ])
    def test_rejected(self, source):
        """Constructs outside the allowed subset are rejected"""
        with pytest.raises(ScriptError):
            ScriptEngine({}).statement_run(source)

    def test_replace_requires_expression(self):
        """Statements are not valid in replace mode"""
        with pytest.raises(ScriptError, match="invalid script"):
            ScriptEngine({}).expression_evaluate("x = 1")

    def test_builtins_allowed(self):
        """Allow-listed builtins can be called"""
        engine = ScriptEngine({"items": [3, 1, 2]})
        assert engine.expression_evaluate("max(items) + len(items)") == 6
        assert engine.expression_evaluate("str(sorted(items))") == "[1, 2, 3]"

    def test_assignment_lands_in_namespace(self):
        """Assignments write to the supplied namespace"""
        namespace = {}
        ScriptEngine(namespace).statement_run("a, b = 1, 2\nc = a + b")
        assert namespace == {"a": 1, "b": 2, "c": 3}

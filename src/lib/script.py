"""
Restricted script engine for code directives

Code directives run small Python snippets against a namespace that lives for
the whole expansion run, so a counter set on one line can be read on a later
one. Snippets are parsed with `ast` and checked against an allow-list before
they are compiled; anything that could reach outside the namespace
(attribute access, imports, definitions, dunder names) is rejected.

Example:
    >>> engine = ScriptEngine({})
    >>> engine.statement_run("n = 2")
    >>> engine.expression_evaluate("n * 21")
    42
"""

import ast
from typing import Any, Dict, Optional

from .errors import ScriptError


SAFE_BUILTINS: Dict[str, Any] = {
    "abs": abs,
    "bool": bool,
    "dict": dict,
    "enumerate": enumerate,
    "float": float,
    "int": int,
    "len": len,
    "list": list,
    "max": max,
    "min": min,
    "range": range,
    "round": round,
    "sorted": sorted,
    "str": str,
    "sum": sum,
    "tuple": tuple,
    "zip": zip,
    "True": True,
    "False": False,
    "None": None,
}

ALLOWED_NODES = (
    # containers
    ast.Module, ast.Expression, ast.Expr,
    # statements
    ast.Assign, ast.AugAssign, ast.If, ast.For, ast.Pass,
    # expressions
    ast.Name, ast.Constant, ast.BinOp, ast.UnaryOp, ast.BoolOp, ast.Compare,
    ast.IfExp, ast.Call, ast.keyword, ast.Subscript, ast.Slice,
    ast.List, ast.Tuple, ast.Dict, ast.Set, ast.JoinedStr, ast.FormattedValue,
    # operators and contexts
    ast.operator, ast.unaryop, ast.cmpop, ast.boolop, ast.expr_context,
)


class ScriptEngine:
    """
    Allow-listed evaluator over an explicit namespace

    Args:
        namespace: Mutable mapping scripts read and assign; shared by every
                   snippet run through this engine
    """

    def __init__(self, namespace: Dict[str, Any]) -> None:
        self.namespace = namespace
        self.globals: Dict[str, Any] = {"__builtins__": SAFE_BUILTINS}

    def tree_check(self, tree: ast.AST, line_number: Optional[int] = None) -> None:
        """
        Reject any node outside the allow-list.

        Raises:
            ScriptError: Naming the first disallowed construct
        """
        for node in ast.walk(tree):
            if not isinstance(node, ALLOWED_NODES):
                raise ScriptError(f"'{type(node).__name__}' is not allowed in scripts", line_number)
            if isinstance(node, ast.Name) and node.id.startswith("_"):
                raise ScriptError(f"name '{node.id}' is not allowed in scripts", line_number)
            if isinstance(node, ast.Call):
                if not isinstance(node.func, ast.Name) or node.func.id not in SAFE_BUILTINS:
                    raise ScriptError("only builtin functions may be called in scripts", line_number)

    def source_compile(self, source: str, mode: str, line_number: Optional[int] = None):
        try:
            tree = ast.parse(source, mode=mode)
        except SyntaxError as e:
            raise ScriptError(f"invalid script '{source}': {e.msg}", line_number) from e
        self.tree_check(tree, line_number)
        return compile(tree, f"<directive:{line_number}>", mode)

    def statement_run(self, source: str, line_number: Optional[int] = None) -> None:
        """
        Run a snippet for its effect on the namespace.

        Args:
            source: One or more statements
            line_number: Source line, for error messages
        """
        code = self.source_compile(source, "exec", line_number)
        try:
            exec(code, self.globals, self.namespace)
        except Exception as e:
            raise ScriptError(f"{type(e).__name__}: {e}", line_number) from e

    def expression_evaluate(self, source: str, line_number: Optional[int] = None) -> Any:
        """
        Evaluate a single expression against the namespace.

        Args:
            source: An expression
            line_number: Source line, for error messages

        Returns:
            The expression's value
        """
        code = self.source_compile(source, "eval", line_number)
        try:
            return eval(code, self.globals, self.namespace)
        except Exception as e:
            raise ScriptError(f"{type(e).__name__}: {e}", line_number) from e

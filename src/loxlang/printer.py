from __future__ import annotations
from typing import List, Union

from .ast_nodes import *
from .interpreter import Interpreter


class AstPrinter:
    """Renders trees in parenthesized prefix form, e.g. `(* (- 123) (group 45.67))`."""

    def print(self, node: Union[Stmt, Expr]) -> str:
        if isinstance(node, Stmt):
            return self.stmt(node)
        return self.expr(node)

    def print_program(self, statements: List[Stmt]) -> str:
        return "\n".join(self.stmt(st) for st in statements)

    def stmt(self, st: Stmt) -> str:
        if isinstance(st, ExprStmt):
            return self._paren(";", st.expression)
        if isinstance(st, PrintStmt):
            return self._paren("print", st.expression)
        if isinstance(st, VarDecl):
            if st.initializer is None:
                return f"(var {st.name.lexeme})"
            return f"(var {st.name.lexeme} = {self.expr(st.initializer)})"
        if isinstance(st, Block):
            return self._paren("block", *st.statements)
        if isinstance(st, IfStmt):
            if st.else_branch is None:
                return self._paren("if", st.condition, st.then_branch)
            return self._paren("if-else", st.condition, st.then_branch, st.else_branch)
        if isinstance(st, WhileStmt):
            return self._paren("while", st.condition, st.body)
        if isinstance(st, FunctionDef):
            params = " ".join(p.lexeme for p in st.params)
            body = "".join(" " + self.stmt(s) for s in st.body)
            return f"(fun {st.name.lexeme}({params}){body})"
        if isinstance(st, Return):
            if st.value is None:
                return "(return)"
            return self._paren("return", st.value)
        raise TypeError(f"unexpected statement node {type(st).__name__}")

    def expr(self, e: Expr) -> str:
        if isinstance(e, Literal):
            if isinstance(e.value, str):
                return f'"{e.value}"'
            return Interpreter.stringify(e.value)
        if isinstance(e, Grouping):
            return self._paren("group", e.expression)
        if isinstance(e, UnaryOp):
            return self._paren(e.operator.lexeme, e.right)
        if isinstance(e, (BinaryOp, LogicalOp)):
            return self._paren(e.operator.lexeme, e.left, e.right)
        if isinstance(e, Variable):
            return e.name.lexeme
        if isinstance(e, Assign):
            return f"(= {e.name.lexeme} {self.expr(e.value)})"
        if isinstance(e, Call):
            return self._paren("call", e.callee, *e.arguments)
        raise TypeError(f"unexpected expression node {type(e).__name__}")

    def _paren(self, name: str, *parts: Union[Stmt, Expr]) -> str:
        return "(" + name + "".join(" " + self.print(p) for p in parts) + ")"

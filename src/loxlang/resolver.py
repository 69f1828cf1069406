from __future__ import annotations
import logging
from enum import Enum
from typing import Dict, List, Optional, Set

from .ast_nodes import *
from .errors import ErrorReporter
from .tokens import Token

logger = logging.getLogger(__name__)


class FunctionType(Enum):
    NONE = "none"
    FUNCTION = "function"


class Resolver:
    """Binds every local variable use to the number of frames between it and its declaration.

    Scopes map a name to whether its initializer has finished ("ready"). The global scope is
    not on the stack: globals stay unresolved and are looked up by name at runtime. Globals
    whose initializer is being resolved are tracked separately so `var a = a;` is caught at
    the top level too.
    """

    def __init__(self, reporter: Optional[ErrorReporter] = None):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.scopes: List[Dict[str, bool]] = []
        self.pending_globals: Set[str] = set()
        self.current_function = FunctionType.NONE

    def error(self, token: Token, msg: str):
        self.reporter.token_error(token, msg)

    def resolve(self, statements: List[Stmt]):
        for st in statements:
            self._visit_stmt(st)

    def _push_scope(self):
        self.scopes.append({})

    def _pop_scope(self):
        self.scopes.pop()

    def _declare(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = False

    def _define(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr: Expr, name: Token):
        for i in range(len(self.scopes) - 1, -1, -1):
            if name.lexeme in self.scopes[i]:
                expr.depth = len(self.scopes) - 1 - i
                return
        # not found: global

    # ---------- Statements ----------
    def _visit_stmt(self, st: Stmt):
        if isinstance(st, Block):
            self._push_scope()
            self.resolve(st.statements)
            self._pop_scope()
        elif isinstance(st, VarDecl):
            self._visit_vardecl(st)
        elif isinstance(st, FunctionDef):
            # declared eagerly so the body can refer to itself
            self._declare(st.name)
            self._define(st.name)
            self._resolve_function(st, FunctionType.FUNCTION)
        elif isinstance(st, (ExprStmt, PrintStmt)):
            self._visit_expr(st.expression)
        elif isinstance(st, IfStmt):
            self._visit_expr(st.condition)
            self._visit_stmt(st.then_branch)
            if st.else_branch is not None:
                self._visit_stmt(st.else_branch)
        elif isinstance(st, WhileStmt):
            self._visit_expr(st.condition)
            self._visit_stmt(st.body)
        elif isinstance(st, Return):
            if self.current_function == FunctionType.NONE:
                self.error(st.keyword, "Can't return from top-level code.")
            if st.value is not None:
                self._visit_expr(st.value)
        else:
            raise TypeError(f"unexpected statement node {type(st).__name__}")

    def _visit_vardecl(self, vd: VarDecl):
        self._declare(vd.name)
        if vd.initializer is not None:
            if not self.scopes:
                self.pending_globals.add(vd.name.lexeme)
            try:
                self._visit_expr(vd.initializer)
            finally:
                self.pending_globals.discard(vd.name.lexeme)
        self._define(vd.name)

    def _resolve_function(self, fn: FunctionDef, kind: FunctionType):
        enclosing = self.current_function
        self.current_function = kind

        self._push_scope()
        for param in fn.params:
            if param.lexeme in self.scopes[-1]:
                self.error(param, "Already a parameter with this name in this function.")
            self._declare(param)
            self._define(param)
        self.resolve(fn.body)
        self._pop_scope()

        self.current_function = enclosing

    # ---------- Expressions ----------
    def _visit_expr(self, e: Expr):
        if isinstance(e, Variable):
            if self._in_own_initializer(e.name):
                self.error(e.name, "Can't read local variable in its own initializer.")
            self._resolve_local(e, e.name)
        elif isinstance(e, Assign):
            self._visit_expr(e.value)
            self._resolve_local(e, e.name)
        elif isinstance(e, (BinaryOp, LogicalOp)):
            self._visit_expr(e.left)
            self._visit_expr(e.right)
        elif isinstance(e, UnaryOp):
            self._visit_expr(e.right)
        elif isinstance(e, Grouping):
            self._visit_expr(e.expression)
        elif isinstance(e, Call):
            self._visit_expr(e.callee)
            for arg in e.arguments:
                self._visit_expr(arg)
        elif isinstance(e, Literal):
            pass
        else:
            raise TypeError(f"unexpected expression node {type(e).__name__}")

    def _in_own_initializer(self, name: Token) -> bool:
        for scope in reversed(self.scopes):
            if name.lexeme in scope:
                return scope[name.lexeme] is False
        return name.lexeme in self.pending_globals


def resolve(statements: List[Stmt], reporter: Optional[ErrorReporter] = None):
    Resolver(reporter).resolve(statements)

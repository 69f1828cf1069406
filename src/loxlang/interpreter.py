from __future__ import annotations
import logging
import math
import sys
from typing import Any, List, Optional, TextIO

from .ast_nodes import *
from .environment import Environment
from .errors import ErrorReporter, LoxRuntimeError
from .runtime import NORMAL, Completion, LoxCallable, LoxFunction, Returning, native_functions
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)


class Interpreter:
    """Walks resolved statement trees against a chain of environment frames.

    The global frame lives as long as the interpreter, so an interactive caller can feed it
    one line at a time.
    """

    def __init__(self, reporter: Optional[ErrorReporter] = None, out: Optional[TextIO] = None):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.out = out if out is not None else sys.stdout
        self.globals = Environment()
        self.environment = self.globals

        for fn in native_functions():
            self.globals.define(fn.name, fn)

    def interpret(self, statements: List[Stmt]):
        try:
            for st in statements:
                self.execute(st)
        except LoxRuntimeError as e:
            logger.debug("runtime error at line %d: %s", e.token.line, e.message)
            self.reporter.runtime_error(e)
        except RecursionError:
            # host stack exhausted; not recoverable inside the language
            self.environment = self.globals
            self.reporter.stack_overflow()

    # ---------- Statements ----------
    def execute(self, st: Stmt) -> Completion:
        if isinstance(st, ExprStmt):
            self.evaluate(st.expression)

        elif isinstance(st, PrintStmt):
            value = self.evaluate(st.expression)
            print(self.stringify(value), file=self.out)

        elif isinstance(st, VarDecl):
            value = None
            if st.initializer is not None:
                value = self.evaluate(st.initializer)
            self.environment.define(st.name.lexeme, value)

        elif isinstance(st, Block):
            return self.execute_block(st.statements, Environment(enclosing=self.environment))

        elif isinstance(st, IfStmt):
            if self.is_truthy(self.evaluate(st.condition)):
                return self.execute(st.then_branch)
            if st.else_branch is not None:
                return self.execute(st.else_branch)

        elif isinstance(st, WhileStmt):
            while self.is_truthy(self.evaluate(st.condition)):
                completion = self.execute(st.body)
                if isinstance(completion, Returning):
                    return completion

        elif isinstance(st, FunctionDef):
            fn = LoxFunction(st, self.environment)
            logger.debug("closure created: %s, params=%d, env_id=%#x",
                         fn, fn.arity(), id(self.environment))
            self.environment.define(st.name.lexeme, fn)

        elif isinstance(st, Return):
            value = None
            if st.value is not None:
                value = self.evaluate(st.value)
            return Returning(value)

        else:
            raise TypeError(f"unexpected statement node {type(st).__name__}")

        return NORMAL

    def execute_block(self, statements: List[Stmt], env: Environment) -> Completion:
        previous = self.environment
        try:
            self.environment = env
            for st in statements:
                completion = self.execute(st)
                if isinstance(completion, Returning):
                    return completion
        finally:
            self.environment = previous
        return NORMAL

    # ---------- Expressions ----------
    def evaluate(self, e: Expr) -> Any:
        if isinstance(e, Literal):
            return e.value

        if isinstance(e, Grouping):
            return self.evaluate(e.expression)

        if isinstance(e, UnaryOp):
            right = self.evaluate(e.right)
            if e.operator.type == TokenType.MINUS:
                self._check_number(e.operator, right)
                return -right
            if e.operator.type == TokenType.BANG:
                return not self.is_truthy(right)
            raise TypeError(f"unexpected unary operator {e.operator.lexeme}")

        if isinstance(e, BinaryOp):
            return self._binary(e)

        if isinstance(e, LogicalOp):
            left = self.evaluate(e.left)
            if e.operator.type == TokenType.OR:
                if self.is_truthy(left):
                    return left
            elif not self.is_truthy(left):
                return left
            return self.evaluate(e.right)

        if isinstance(e, Variable):
            if e.depth is not None:
                return self.environment.get_at(e.depth, e.name.lexeme)
            return self.globals.get(e.name)

        if isinstance(e, Assign):
            value = self.evaluate(e.value)
            if e.depth is not None:
                self.environment.assign_at(e.depth, e.name, value)
            else:
                self.globals.assign(e.name, value)
            return value

        if isinstance(e, Call):
            callee = self.evaluate(e.callee)
            args = [self.evaluate(arg) for arg in e.arguments]

            if not isinstance(callee, LoxCallable):
                raise LoxRuntimeError(e.paren, "Can only call functions.")
            if len(args) != callee.arity():
                raise LoxRuntimeError(
                    e.paren, f"Expected {callee.arity()} arguments but got {len(args)}.")
            return callee.call(self, args)

        raise TypeError(f"unexpected expression node {type(e).__name__}")

    def _binary(self, e: BinaryOp) -> Any:
        left = self.evaluate(e.left)
        right = self.evaluate(e.right)
        op = e.operator
        t = op.type

        # Equality never fails
        if t == TokenType.EQUAL_EQUAL:
            return self.is_equal(left, right)
        if t == TokenType.BANG_EQUAL:
            return not self.is_equal(left, right)

        if t == TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(op, "Operands must be two numbers or two strings.")

        # Arithmetic and comparison
        self._check_numbers(op, left, right)
        if t == TokenType.MINUS:
            return left - right
        if t == TokenType.STAR:
            return left * right
        if t == TokenType.SLASH:
            return self._divide(left, right)
        if t == TokenType.GREATER:
            return left > right
        if t == TokenType.GREATER_EQUAL:
            return left >= right
        if t == TokenType.LESS:
            return left < right
        if t == TokenType.LESS_EQUAL:
            return left <= right
        raise TypeError(f"unexpected binary operator {op.lexeme}")

    @staticmethod
    def _divide(left: float, right: float) -> float:
        try:
            return left / right
        except ZeroDivisionError:
            # IEEE-754, like the host doubles would do
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)

    @staticmethod
    def _check_number(op: Token, operand: Any):
        if not isinstance(operand, float):
            raise LoxRuntimeError(op, "Operand must be a number.")

    @staticmethod
    def _check_numbers(op: Token, left: Any, right: Any):
        if not (isinstance(left, float) and isinstance(right, float)):
            raise LoxRuntimeError(op, "Operands must be numbers.")

    # ---------- Values ----------
    @staticmethod
    def is_truthy(value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return True

    @staticmethod
    def is_equal(a: Any, b: Any) -> bool:
        if a is None or b is None:
            return a is None and b is None
        if type(a) is not type(b):
            return False
        if isinstance(a, LoxCallable):
            return a is b
        return a == b

    @staticmethod
    def stringify(value: Any) -> str:
        if value is None:
            return "nil"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            if math.isnan(value):
                return "NaN"
            if math.isinf(value):
                return "Infinity" if value > 0 else "-Infinity"
            if value.is_integer() and value != 0:
                # integral values print without an exponent or ".0"
                return str(int(value))
            text = str(value)
            if text.endswith(".0"):
                text = text[:-2]
            return text
        return str(value)

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import LoxRuntimeError
from .tokens import Token


@dataclass(eq=False)
class Environment:
    """One lexical frame. The parent link is set at creation and never changes."""
    enclosing: Optional["Environment"] = None
    values: Dict[str, Any] = field(default_factory=dict)

    def define(self, name: str, value: Any):
        # redefinition in the same frame is allowed
        self.values[name] = value

    def ancestor(self, distance: int) -> "Environment":
        env = self
        for _ in range(distance):
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: str) -> Any:
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: Token, value: Any):
        self.ancestor(distance).values[name.lexeme] = value

    def get(self, name: Token) -> Any:
        cur = self
        while cur:
            if name.lexeme in cur.values:
                return cur.values[name.lexeme]
            cur = cur.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        cur = self
        while cur:
            if name.lexeme in cur.values:
                cur.values[name.lexeme] = value
                return
            cur = cur.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

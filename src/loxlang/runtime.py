"""Runtime values that are not plain Python scalars, and statement completions."""
from __future__ import annotations
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List

from .ast_nodes import FunctionDef
from .environment import Environment

if TYPE_CHECKING:
    from .interpreter import Interpreter


# ---------- Completions ----------
class Completion: ...

@dataclass(frozen=True)
class Normal(Completion):
    pass

@dataclass(frozen=True)
class Returning(Completion):
    value: Any = None

NORMAL = Normal()


# ---------- Callables ----------
class LoxCallable(ABC):

    @abstractmethod
    def arity(self) -> int: ...

    @abstractmethod
    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any: ...


class LoxFunction(LoxCallable):
    """A function declaration paired with the frame it was declared in.

    Equality is identity: two evaluations of the same declaration are different values.
    """

    def __init__(self, declaration: FunctionDef, closure: Environment):
        self.declaration = declaration
        self.closure = closure

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        # parented to the closure, not the caller
        env = Environment(enclosing=self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            env.define(param.lexeme, arg)

        completion = interpreter.execute_block(self.declaration.body, env)
        if isinstance(completion, Returning):
            return completion.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"

    __repr__ = __str__


class NativeFunction(LoxCallable):
    def __init__(self, name: str, arity: int, fn: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        return self.fn(*arguments)

    def __str__(self) -> str:
        return "<native fn>"

    __repr__ = __str__


def native_functions() -> List[NativeFunction]:
    return [
        NativeFunction("clock", 0, lambda: float(time.time())),
    ]

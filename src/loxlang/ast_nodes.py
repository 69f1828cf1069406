from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .tokens import Token


class Node: ...

# ---------- Expressions ----------
class Expr(Node): ...

@dataclass
class Literal(Expr):
    value: Any = None

@dataclass
class Grouping(Expr):
    expression: Expr = None

@dataclass
class UnaryOp(Expr):
    operator: Token = None
    right: Expr = None

@dataclass
class BinaryOp(Expr):
    left: Expr = None
    operator: Token = None
    right: Expr = None

@dataclass
class LogicalOp(Expr):
    left: Expr = None
    operator: Token = None  # 'and' / 'or'
    right: Expr = None

@dataclass
class Variable(Expr):
    name: Token = None
    # filled in by the resolver; None => global
    depth: Optional[int] = field(default=None, compare=False)

@dataclass
class Assign(Expr):
    name: Token = None
    value: Expr = None
    depth: Optional[int] = field(default=None, compare=False)

@dataclass
class Call(Expr):
    callee: Expr = None
    paren: Token = None
    arguments: List[Expr] = field(default_factory=list)

# ---------- Statements ----------
class Stmt(Node): ...

@dataclass
class ExprStmt(Stmt):
    expression: Expr = None

@dataclass
class PrintStmt(Stmt):
    expression: Expr = None

@dataclass
class VarDecl(Stmt):
    name: Token = None
    initializer: Optional[Expr] = None

@dataclass
class Block(Stmt):
    statements: List[Stmt] = field(default_factory=list)

@dataclass
class IfStmt(Stmt):
    condition: Expr = None
    then_branch: Stmt = None
    else_branch: Optional[Stmt] = None

@dataclass
class WhileStmt(Stmt):
    condition: Expr = None
    body: Stmt = None

@dataclass
class FunctionDef(Stmt):
    name: Token = None
    params: List[Token] = field(default_factory=list)
    body: List[Stmt] = field(default_factory=list)

@dataclass
class Return(Stmt):
    keyword: Token = None
    value: Optional[Expr] = None

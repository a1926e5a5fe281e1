from dataclasses import dataclass
from typing import List, Any, Optional

from .tokens import Token


# The node set is closed: the interpreter and the printer dispatch on it with
# `match` statements rather than a visitor.

class Expr:
    pass


class Stmt:
    pass


# --- Concrete Expression Nodes ---

@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Grouping(Expr):
    expression: Expr


@dataclass
class Literal(Expr):
    value: Any


@dataclass
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass
class Variable(Expr):
    name: Token


@dataclass
class Assign(Expr):
    name: Token
    value: Expr


@dataclass
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: List[Expr]


# --- Concrete Statement Nodes ---

@dataclass
class Empty(Stmt):
    line: int


@dataclass
class Expression(Stmt):
    expression: Expr


@dataclass
class Print(Stmt):
    expression: Expr


@dataclass
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass
class Block(Stmt):
    statements: List[Stmt]


@dataclass
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass
class Break(Stmt):
    keyword: Token


@dataclass
class Function(Stmt):
    name: Token
    params: List[Token]
    body: Block


@dataclass
class Return(Stmt):
    keyword: Token
    value: Expr

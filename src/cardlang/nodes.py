## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Syntax tree shared by the parser and the runtime.  Every node is an immutable dataclass,
# and the `Statement` and `Expression` unions are closed: consumers `match` over them.
#

from enum import Enum
from dataclasses import dataclass


class GlobalKey(Enum):
    NAME = "name"
    PLAYERS = "players"
    STACK = "stack"
    DECK = "deck"
    CURRENT_PLAYER = "current_player"

class TransferCount(Enum):
    END = "end"

class TransferModifier(Enum):
    ALTERNATE = "alternate"


# Expressions ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Symbol:
    name: str

@dataclass(frozen=True)
class Number:
    value: float

@dataclass(frozen=True)
class Bool:
    value: bool

@dataclass(frozen=True)
class Comparison:
    left: "Expression"
    right: "Expression"

@dataclass(frozen=True)
class And:
    left: "Expression"
    right: "Expression"

@dataclass(frozen=True)
class FunctionCall:
    name: str
    arguments: tuple["Expression", ...] = ()


Expression = Symbol | Number | Bool | Comparison | And | FunctionCall


# Statements ──────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Declaration:
    key: GlobalKey
    value: Symbol | Number

@dataclass(frozen=True)
class Definition:
    name: str
    arguments: tuple[str, ...] = ()
    body: tuple["Statement", ...] = ()

@dataclass(frozen=True)
class Transfer:
    source: str
    target: str
    modifier: TransferModifier | None = None
    count: TransferCount | None = None

@dataclass(frozen=True)
class IfStatement:
    expression: Expression
    body: tuple["Statement", ...] = ()

@dataclass(frozen=True)
class CheckStatement:
    expression: Expression

@dataclass(frozen=True)
class ReturnStatement:
    expression: Expression


# `FunctionCall` doubles as a statement, evaluated for its side effects.
Statement = Declaration | Definition | Transfer | FunctionCall | IfStatement | CheckStatement | ReturnStatement

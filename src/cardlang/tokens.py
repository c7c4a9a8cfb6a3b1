## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from enum import Enum
from dataclasses import dataclass


class TokenType(Enum):
    # Keywords
    NAME = "name"
    STACK = "stack"
    DECK = "deck"
    PLAYERS = "players"
    CURRENT_PLAYER = "current_player"
    DEFINE = "define"
    CHECK = "check"
    IS = "is"
    IF = "if"
    TRUE = "true"
    FALSE = "false"
    RETURN = "return"
    # Punctuation
    OPEN_PARENS = "("
    CLOSE_PARENS = ")"
    COMMA = ","
    OPEN_BRACKET = "{"
    CLOSE_BRACKET = "}"
    TRANSFER = ">"
    AMPERSAND = "&"
    NEWLINE = "\n"
    # Payload carriers
    SYMBOL = "symbol"
    NUMBER = "number"


KEYWORDS: dict[str, TokenType] = {
    t.value: t for t in (
        TokenType.NAME, TokenType.STACK, TokenType.DECK, TokenType.PLAYERS, TokenType.CURRENT_PLAYER,
        TokenType.DEFINE, TokenType.CHECK, TokenType.IS, TokenType.IF, TokenType.TRUE, TokenType.FALSE,
        TokenType.RETURN,
    )
}

SINGLE_CHARS: dict[str, TokenType] = {
    t.value: t for t in (
        TokenType.OPEN_PARENS, TokenType.CLOSE_PARENS, TokenType.COMMA, TokenType.OPEN_BRACKET,
        TokenType.CLOSE_BRACKET, TokenType.TRANSFER, TokenType.AMPERSAND, TokenType.NEWLINE,
    )
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str | float | None = None

    @classmethod
    def symbol(cls, name: str) -> "Token":
        return cls(TokenType.SYMBOL, name)

    @classmethod
    def number(cls, value: float) -> "Token":
        return cls(TokenType.NUMBER, float(value))

    def __repr__(self):
        if self.value is None: return self.type.name
        return f"{self.type.name}({self.value!r})"

    def __str__(self):
        if self.type == TokenType.NEWLINE: return "\\n"
        if self.type == TokenType.NUMBER: return f"{self.value:g}"
        return str(self.value) if self.value is not None else self.type.value


@dataclass(frozen=True)
class SourceToken:
    token: Token
    line: int

    @property
    def type(self) -> TokenType:
        return self.token.type

    @property
    def value(self):
        return self.token.value

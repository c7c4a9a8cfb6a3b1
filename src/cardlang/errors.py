## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from enum import Enum

import lark


class LexErrorKind(Enum):
    EMPTY_SPECIFICATION = "empty specification"
    PARSE_ERROR = "parse error"

class ParseErrorKind(Enum):
    EXPECTED_SYMBOL = "expected symbol"
    UNEXPECTED_END_OF_STREAM = "unexpected end of stream"
    UNEXPECTED_TOKEN = "unexpected token"


class CardError(Exception):
    """Base class for all errors raised by the card language front end and shell."""
    pass

class CardLexError(CardError):
    def __init__(self, kind: LexErrorKind, line: int, message: str = ""):
        super().__init__(message or f"{kind.value} on line {line}")
        self.kind = kind
        self.line = line

class CardParseError(CardError):
    def __init__(self, kind: ParseErrorKind, line: int, *, token=None, message: str = ""):
        super().__init__(message or f"{kind.value} on line {line}" + (f" at `{token}`" if token is not None else ""))
        self.kind = kind
        self.line = line
        self.token = token

class CardIncompleteParse(CardParseError, lark.exceptions.ParseError):
    def __init__(self, line: int, *, token=None, message: str = ""):
        super().__init__(ParseErrorKind.UNEXPECTED_END_OF_STREAM, line, token=token, message=message)


class CardCommandError(CardError, ValueError):
    """Shell input that the command grammar does not accept."""
    def __init__(self, message: str, *, command: str = "", column: int | None = None):
        super().__init__(message)
        self.command = command
        self.column = column

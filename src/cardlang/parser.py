## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .tokens import TokenType, SourceToken
from .nodes import (
    GlobalKey, TransferCount,
    Symbol, Number, Bool, Comparison, And, FunctionCall, Expression,
    Declaration, Definition, Transfer, IfStatement, CheckStatement, ReturnStatement, Statement,
)
from .errors import CardParseError, CardIncompleteParse, ParseErrorKind
from .lexer import lex


_DECLARATION_KEYS = {
    TokenType.NAME: GlobalKey.NAME,
    TokenType.PLAYERS: GlobalKey.PLAYERS,
    TokenType.CURRENT_PLAYER: GlobalKey.CURRENT_PLAYER,
    TokenType.STACK: GlobalKey.STACK,
    TokenType.DECK: GlobalKey.DECK,
}

# Keywords that stand for a stack or value when used as an operand.
_KEYWORD_OPERANDS = {
    TokenType.DECK: "deck",
    TokenType.PLAYERS: "players",
    TokenType.CURRENT_PLAYER: "current_player",
}

_END_COUNT = "end"
MAX_NESTING_DEPTH = 64


class TokenStream:
    """Forward-only cursor over source tokens; remembers the line of the last token seen."""

    def __init__(self, tokens: list[SourceToken], depth: int = 0):
        self.tokens = tokens
        self.position = 0
        self.line = tokens[0].line if tokens else 0
        self.depth = depth

    def peek(self) -> SourceToken | None:
        return self.tokens[self.position] if self.position < len(self.tokens) else None

    def next(self) -> SourceToken | None:
        if (tok := self.peek()) is None: return None
        self.position += 1
        self.line = tok.line
        return tok

    def skip_newlines(self) -> None:
        while (tok := self.peek()) is not None and tok.type == TokenType.NEWLINE:
            self.next()

    def expect(self, kind: TokenType) -> SourceToken:
        if (tok := self.next()) is None:
            raise CardIncompleteParse(self.line, message=f"Expected `{kind.value}` but source ended on line {self.line}.")
        if tok.type != kind:
            raise CardParseError(ParseErrorKind.UNEXPECTED_TOKEN, tok.line, token=tok.token,
                                 message=f"Expected `{kind.value}` but found `{tok.token}` on line {tok.line}.")
        return tok

    def required(self, context: str) -> SourceToken:
        if (tok := self.next()) is None:
            raise CardIncompleteParse(self.line, message=f"Source ended on line {self.line} while reading {context}.")
        return tok


def _unexpected(tok: SourceToken, context: str) -> CardParseError:
    return CardParseError(ParseErrorKind.UNEXPECTED_TOKEN, tok.line, token=tok.token,
                          message=f"Unexpected `{tok.token}` in {context} on line {tok.line}.")


def _check_depth(stream: TokenStream) -> None:
    if stream.depth >= MAX_NESTING_DEPTH:
        raise CardParseError(ParseErrorKind.UNEXPECTED_TOKEN, stream.line,
                             message=f"Nesting deeper than {MAX_NESTING_DEPTH} levels on line {stream.line}.")


# Statements ──────────────────────────────────────────────────────────────────────────────
def parse(tokens: list[SourceToken]) -> list[Statement]:
    return _parse_statements(TokenStream(tokens))


def parse_source(source: str) -> list[Statement]:
    return parse(lex(source))


def _parse_statements(stream: TokenStream) -> list[Statement]:
    statements = []
    while (tok := stream.next()) is not None:
        match tok.type:
            case TokenType.NAME | TokenType.PLAYERS | TokenType.CURRENT_PLAYER | TokenType.STACK:
                statements.append(_declaration(tok, stream))
            case TokenType.DECK:
                after = stream.required("a deck statement")
                if after.type == TokenType.SYMBOL:
                    statements.append(Declaration(GlobalKey.DECK, Symbol(after.value)))
                elif after.type == TokenType.TRANSFER:
                    statements.append(_transfer("deck", stream))
                else:
                    raise _unexpected(after, "a deck statement")
            case TokenType.DEFINE:
                statements.append(_definition(stream))
            case TokenType.SYMBOL:
                after = stream.required(f"statement `{tok.value}`")
                if after.type == TokenType.OPEN_PARENS:
                    statements.append(FunctionCall(tok.value, _arguments(stream)))
                elif after.type == TokenType.TRANSFER:
                    statements.append(_transfer(tok.value, stream))
                else:
                    raise _unexpected(after, f"statement `{tok.value}`")
            case TokenType.IF:
                stream.next()  # Opening parenthesis is implied by the grammar.
                expression = _expression(stream)
                _close_parens(stream)
                statements.append(IfStatement(expression, _block(stream)))
            case TokenType.CHECK:
                stream.expect(TokenType.OPEN_PARENS)
                expression = _expression(stream)
                _close_parens(stream)
                statements.append(CheckStatement(expression))
            case TokenType.RETURN:
                stream.expect(TokenType.OPEN_PARENS)
                expression = _expression(stream)
                _close_parens(stream)
                statements.append(ReturnStatement(expression))
            case _:
                continue
    return statements


def _declaration(tok: SourceToken, stream: TokenStream) -> Declaration:
    value = stream.required(f"the `{tok.type.value}` declaration")
    match value.type:
        case TokenType.SYMBOL: return Declaration(_DECLARATION_KEYS[tok.type], Symbol(value.value))
        case TokenType.NUMBER: return Declaration(_DECLARATION_KEYS[tok.type], Number(value.value))
    raise _unexpected(value, f"the `{tok.type.value}` declaration")


def _definition(stream: TokenStream) -> Definition:
    name = stream.required("a definition")
    if name.type != TokenType.SYMBOL:
        raise CardParseError(ParseErrorKind.EXPECTED_SYMBOL, name.line, token=name.token,
                             message=f"Expected a name after `define` on line {name.line}, found `{name.token}`.")
    stream.expect(TokenType.OPEN_PARENS)
    arguments = []
    while (arg := stream.required(f"arguments of `{name.value}`")).type != TokenType.CLOSE_PARENS:
        if arg.type != TokenType.SYMBOL:
            raise CardParseError(ParseErrorKind.EXPECTED_SYMBOL, arg.line, token=arg.token,
                                 message=f"Expected an argument name for `{name.value}` on line {arg.line}, found `{arg.token}`.")
        arguments.append(arg.value)
    return Definition(name.value, tuple(arguments), _block(stream))


def _block(stream: TokenStream) -> tuple[Statement, ...]:
    """Collect tokens up to the matching close bracket, tracking nesting, and parse them as statements."""
    _check_depth(stream)
    stream.skip_newlines()
    stream.expect(TokenType.OPEN_BRACKET)
    body, depth = [], 1
    while True:
        if (tok := stream.next()) is None:
            raise CardIncompleteParse(stream.line, message=f"Block is missing its closing `}}` at line {stream.line}.")
        if tok.type == TokenType.OPEN_BRACKET: depth += 1
        elif tok.type == TokenType.CLOSE_BRACKET:
            depth -= 1
            if depth == 0: break
        body.append(tok)
    return tuple(_parse_statements(TokenStream(body, stream.depth + 1)))


def _transfer(source: str, stream: TokenStream) -> Transfer:
    target = stream.required(f"the transfer from `{source}`")
    match target.type:
        case TokenType.DECK | TokenType.PLAYERS: label = _KEYWORD_OPERANDS[target.type]
        case TokenType.SYMBOL: label = target.value
        case _: raise _unexpected(target, f"the transfer from `{source}`")

    count = None
    if (tok := stream.peek()) is not None and tok.type == TokenType.SYMBOL and tok.value == _END_COUNT:
        stream.next()
        count = TransferCount.END
    return Transfer(source, label, None, count)


def _arguments(stream: TokenStream) -> tuple[Expression, ...]:
    """Comma-separated argument expressions, consuming the closing parenthesis."""
    arguments = []
    while True:
        stream.skip_newlines()
        if (tok := stream.peek()) is None:
            raise CardIncompleteParse(stream.line, message=f"Argument list is missing its closing `)` at line {stream.line}.")
        if tok.type == TokenType.CLOSE_PARENS:
            stream.next()
            return tuple(arguments)
        if tok.type == TokenType.COMMA:
            stream.next()
            continue
        arguments.append(_expression(stream))


def _close_parens(stream: TokenStream) -> None:
    if (tok := stream.peek()) is not None and tok.type == TokenType.CLOSE_PARENS:
        stream.next()
    elif tok is None:
        raise CardIncompleteParse(stream.line, message=f"Expected `)` but source ended on line {stream.line}.")
    else:
        raise _unexpected(tok, "a parenthesized expression")


# Expressions ─────────────────────────────────────────────────────────────────────────────
def _primitive(stream: TokenStream) -> Expression:
    tok = stream.required("an expression")
    match tok.type:
        case TokenType.TRUE: return Bool(True)
        case TokenType.FALSE: return Bool(False)
        case TokenType.SYMBOL: return Symbol(tok.value)
        case TokenType.NUMBER: return Number(tok.value)
        case TokenType.DECK | TokenType.PLAYERS | TokenType.CURRENT_PLAYER: return Symbol(_KEYWORD_OPERANDS[tok.type])
    raise _unexpected(tok, "an expression")


def _operand(stream: TokenStream) -> Expression:
    """A primitive, optionally applied as a function when followed by an argument list."""
    left = _primitive(stream)
    while (tok := stream.peek()) is not None and tok.type == TokenType.OPEN_PARENS:
        if not isinstance(left, Symbol): raise _unexpected(tok, "an expression")
        stream.next()
        left = FunctionCall(left.name, _arguments(stream))
    return left


def _expression(stream: TokenStream) -> Expression:
    _check_depth(stream)
    stream.depth += 1
    try:
        return _combine(_operand(stream), stream)
    finally:
        stream.depth -= 1


def _combine(left: Expression, stream: TokenStream) -> Expression:
    """Extend `left` from left to right with `is` comparisons and `&` conjunctions."""
    while True:
        if (tok := stream.peek()) is None: return left
        match tok.type:
            case TokenType.CLOSE_PARENS | TokenType.COMMA:
                return left
            case TokenType.IS:
                # Binds only the next operand, so `a is 1 & b is 2` groups as two comparisons.
                stream.next()
                left = Comparison(left, _operand(stream))
            case TokenType.AMPERSAND:
                stream.next()
                return And(left, _expression(stream))
            case _:
                raise _unexpected(tok, "an expression")


# Diagnostics ─────────────────────────────────────────────────────────────────────────────
def format_parse_error_context(filename, line, source, token_value=None):
    lines = source.splitlines()
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i]
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if token_value and (column := line_content.find(token_value)) >= 0:
                line_content = (
                    line_content[:column] +
                    f"\033[48;5;30m\033[1;97m{line_content[column:column+len(token_value)]}\033[0m" +
                    line_content[column+len(token_value):]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'

## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .tokens import Token, TokenType, SourceToken, KEYWORDS, SINGLE_CHARS
from .errors import CardLexError, LexErrorKind


_WHITESPACE = (' ', '\t', '\r')
_COMMENT_START = '.'


def is_word_finished(next_char: str | None) -> bool:
    """A word keeps accumulating through letters, digits, underscores and the attribute colon."""
    return next_char is None or not (next_char.isalnum() or next_char in '_:')


def _skip_comment(source: str, index: int, line: int) -> tuple[int, int]:
    """Skip a `.( ... )` comment whose opening parenthesis is at `index`; nested pairs are balanced."""
    start_line, depth = line, 0
    while index < len(source):
        ch = source[index]
        if ch == '\\':
            if source[index+1:index+2] == '\n': line += 1
            index += 2
            continue
        if ch == '\n': line += 1
        elif ch == '(': depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0: return index + 1, line
        index += 1
    raise CardLexError(LexErrorKind.PARSE_ERROR, start_line, "Comment opened with `.(` is never closed.")


def _resolve_partial(partial: str, line: int) -> Token:
    if partial[0].isalpha():
        return Token.symbol(partial)
    try:
        return Token.number(float(partial))
    except ValueError:
        raise CardLexError(LexErrorKind.PARSE_ERROR, line, f"Unable to read `{partial}` on line {line}.") from None


def lex(source: str) -> list[SourceToken]:
    tokens: list[SourceToken] = []
    partial: str | None = None
    line, index = 1, 0

    while index < len(source):
        ch = source[index]
        next_char = source[index+1] if index + 1 < len(source) else None
        index += 1

        if partial is None:
            if ch in _WHITESPACE: continue
            if (single := SINGLE_CHARS.get(ch)) is not None:
                tokens.append(SourceToken(Token(single), line))
                if single == TokenType.NEWLINE: line += 1
                continue
            partial = ch
        else:
            partial += ch

        if not is_word_finished(next_char): continue

        if (keyword := KEYWORDS.get(partial)) is not None:
            tokens.append(SourceToken(Token(keyword), line))
        elif partial.startswith(_COMMENT_START):
            if partial != _COMMENT_START or next_char != '(':
                raise CardLexError(LexErrorKind.PARSE_ERROR, line, f"Expected `.(` to open a comment on line {line}.")
            index, line = _skip_comment(source, index, line)
        else:
            tokens.append(SourceToken(_resolve_partial(partial, line), line))
        partial = None

    if len(tokens) == 0:
        raise CardLexError(LexErrorKind.EMPTY_SPECIFICATION, line, "Source contains no statements.")
    return tokens

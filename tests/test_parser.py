## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark
import pytest

from cardlang.parser import parse, parse_source
from cardlang.tokens import Token, TokenType, SourceToken
from cardlang.nodes import (
    GlobalKey, TransferCount,
    Symbol, Number, Bool, Comparison, And, FunctionCall,
    Declaration, Definition, Transfer, IfStatement, CheckStatement, ReturnStatement,
)
from cardlang.errors import CardParseError, CardIncompleteParse, ParseErrorKind


def _stream(*tokens: Token, line: int = 1) -> list[SourceToken]:
    return [SourceToken(t, line) for t in tokens]


def _parse_error(source: str) -> CardParseError:
    with pytest.raises(CardParseError) as exc:
        parse_source(source)
    return exc.value


def test_single_declaration_from_tokens():
    result = parse(_stream(Token(TokenType.NAME), Token.symbol("turns")))
    assert result == [Declaration(GlobalKey.NAME, Symbol("turns"))]


def test_numerical_declaration():
    assert parse_source("players 2") == [Declaration(GlobalKey.PLAYERS, Number(2.0))]


def test_simple_game_declarations():
    source = "name turns\nplayers 2\ndeck StandardDeck\ncurrent_player 1\nstack middle\n"
    assert parse_source(source) == [
        Declaration(GlobalKey.NAME, Symbol("turns")),
        Declaration(GlobalKey.PLAYERS, Number(2.0)),
        Declaration(GlobalKey.DECK, Symbol("StandardDeck")),
        Declaration(GlobalKey.CURRENT_PLAYER, Number(1.0)),
        Declaration(GlobalKey.STACK, Symbol("middle")),
    ]


def test_empty_token_list_parses_to_nothing():
    assert parse([]) == []


def test_function_definition_without_body():
    assert parse_source("define setup() {}") == [Definition("setup", (), ())]


def test_function_definition_with_arguments():
    [definition] = parse_source("define player_move(player) {\n}")
    assert definition.name == "player_move"
    assert definition.arguments == ("player",)
    assert definition.body == ()


def test_definition_requires_a_symbol_name():
    err = _parse_error("name x\ndefine 1() {}")
    assert err.kind == ParseErrorKind.EXPECTED_SYMBOL
    assert err.line == 2


def test_definition_arguments_must_be_symbols():
    err = _parse_error("define f(a 2) {}")
    assert err.kind == ParseErrorKind.EXPECTED_SYMBOL
    assert err.line == 1


def test_stack_transfer():
    assert parse_source("deck > players") == [Transfer("deck", "players", None, None)]


def test_function_body_is_parsed():
    [definition] = parse_source("define setup() {\n    deck > players\n}")
    assert definition.body == (Transfer("deck", "players"),)


def test_incomplete_function_body_is_end_of_stream():
    err = _parse_error("define setup() {\n deck > players")
    assert err.kind == ParseErrorKind.UNEXPECTED_END_OF_STREAM
    assert isinstance(err, CardIncompleteParse)
    assert isinstance(err, lark.exceptions.ParseError)
    assert err.line == 2


def test_invalid_function_body_reports_inner_line():
    err = _parse_error("define setup() {\ndefine\n}")
    assert err.kind == ParseErrorKind.EXPECTED_SYMBOL
    assert err.line == 2


def test_deck_must_be_followed_by_symbol_or_transfer():
    err = _parse_error("name x\n\ndeck players")
    assert err.kind == ParseErrorKind.UNEXPECTED_TOKEN
    assert err.line == 3


def test_declaration_requires_a_value():
    err = _parse_error("name x\nplayers\nstack middle")
    assert err.kind == ParseErrorKind.UNEXPECTED_TOKEN
    assert err.line == 2


def test_function_call_with_deck_argument():
    assert parse_source("shuffle(deck)") == [FunctionCall("shuffle", (Symbol("deck"),))]


def test_function_call_without_arguments():
    assert parse_source("end()") == [FunctionCall("end", ())]


def test_function_call_with_number_and_several_arguments():
    assert parse_source("winner(1)\nfilter(player:hand, is_ace)") == [
        FunctionCall("winner", (Number(1.0),)),
        FunctionCall("filter", (Symbol("player:hand"), Symbol("is_ace"))),
    ]


def test_symbol_must_be_followed_by_call_or_transfer():
    err = _parse_error("define setup() {\n  deck > players\n  middle deck\n}")
    assert err.kind == ParseErrorKind.UNEXPECTED_TOKEN
    assert err.line == 3


def test_player_hand_to_deck_transfer():
    assert parse_source("player:hand > deck") == [Transfer("player:hand", "deck")]


def test_transfer_with_end_count():
    assert parse_source("player:hand > deck end") == [Transfer("player:hand", "deck", None, TransferCount.END)]


def test_transfer_does_not_consume_following_statement():
    assert parse_source("deck > middle\nshuffle()") == [Transfer("deck", "middle"), FunctionCall("shuffle")]


def test_nested_if_block_does_not_end_definition():
    source = """
define player_move(player) {
    if (count(player:hand) is 0) {
        winner(player:id)
    }
    next_player()
}
"""
    [definition] = parse_source(source)
    assert definition.body == (
        IfStatement(
            Comparison(FunctionCall("count", (Symbol("player:hand"),)), Number(0.0)),
            (FunctionCall("winner", (Symbol("player:id"),)),),
        ),
        FunctionCall("next_player"),
    )


def test_check_statement():
    assert parse_source("check(current_player is 1)") == [
        CheckStatement(Comparison(Symbol("current_player"), Number(1.0)))]


def test_check_requires_open_parens():
    err = _parse_error("name x\ncheck true")
    assert err.kind == ParseErrorKind.UNEXPECTED_TOKEN
    assert err.line == 2


def test_return_statement():
    assert parse_source("return(card:rank is ace)") == [
        ReturnStatement(Comparison(Symbol("card:rank"), Symbol("ace")))]


def test_boolean_literals():
    assert parse_source("return(true)\nreturn(false)") == [ReturnStatement(Bool(True)), ReturnStatement(Bool(False))]


def test_conjunction_of_comparisons():
    [stmt] = parse_source("check(card:rank is ace & card:suit is spades)")
    assert stmt.expression == And(
        Comparison(Symbol("card:rank"), Symbol("ace")),
        Comparison(Symbol("card:suit"), Symbol("spades")),
    )


def test_unexpected_token_in_expression():
    err = _parse_error("define f() {\n\n  check(a b)\n}")
    assert err.kind == ParseErrorKind.UNEXPECTED_TOKEN
    assert err.line == 3


def test_if_requires_a_block():
    err = _parse_error("if (true) 5")
    assert err.kind == ParseErrorKind.UNEXPECTED_TOKEN


def test_unclosed_argument_list_is_end_of_stream():
    err = _parse_error("winner(1")
    assert isinstance(err, CardIncompleteParse)


def test_stray_tokens_are_skipped():
    assert parse_source("\n\n)\nplayers 4\n") == [Declaration(GlobalKey.PLAYERS, Number(4.0))]


def test_moderate_nesting_is_accepted():
    source = "define setup() {\n" + "if (true) {\n" * 20 + "end()\n" + "}\n" * 21
    [definition] = parse_source(source)
    depth, body = 0, definition.body
    while body and isinstance(body[0], IfStatement):
        depth, body = depth + 1, body[0].body
    assert depth == 20
    assert body == (FunctionCall("end"),)


def test_deeply_nested_blocks_are_a_parse_error():
    source = "define setup() {\n" + "if (true) {\n" * 400 + "}\n" * 401
    err = _parse_error(source)
    assert err.kind == ParseErrorKind.UNEXPECTED_TOKEN
    assert "Nesting" in str(err)


def test_long_conjunction_chains_are_a_parse_error():
    err = _parse_error("check(" + " & ".join(["true"] * 600) + ")")
    assert err.kind == ParseErrorKind.UNEXPECTED_TOKEN
    assert err.line == 1


def test_comparison_binds_a_single_operand():
    [stmt] = parse_source("check(a is b is c)")
    assert stmt.expression == Comparison(Comparison(Symbol("a"), Symbol("b")), Symbol("c"))

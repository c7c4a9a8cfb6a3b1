## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from cardlang.game import Game, load_game
from cardlang.nodes import Declaration, GlobalKey, Symbol, Number


def _game(body: str, players: int = 3, extra: str = "") -> Game:
    source = f"name test_game\nplayers {players}\n{extra}\ndefine setup() {{\n{body}\n}}\n"
    return load_game(source)


def test_deck_is_displayed_before_start():
    game = Game([Declaration(GlobalKey.DECK, Symbol("StandardDeck"))])
    cards = game.show("deck").split(", ")
    assert cards[0] == "ace spades"
    assert len(cards) == 52
    assert game.show("game") == "pending"


def test_single_deal_to_three_players():
    game = _game("deck > players")
    game.start()
    cards = game.show("deck").split(", ")
    assert len(cards) == 49
    assert cards[-1] == "ten diamonds"
    assert game.show("player 1") == "king diamonds"
    assert game.show("player 2 hand") == "queen diamonds"
    assert game.show("player 3") == "jack diamonds"


def test_end_deal_drains_deck_across_players():
    game = _game("deck > players end")
    game.start()
    assert game.show("deck") == ""
    assert game.show("players") == "player 1 (cards: 18)\nplayer 2 (cards: 17)\nplayer 3 (cards: 17)"


def test_winner_then_end_is_reported_in_game_status():
    source = "players 2\ndefine setup() {\n winner(1)\n}\ndefine player_move() {\n end()\n}\n"
    game = load_game(source)
    game.start()
    assert game.show("game") == "active\nwinners: 1"
    game.player_move(1)
    assert game.show("game") == "game over\nwinners: 1"


def test_several_winners_are_listed_in_order():
    game = _game("winner(3)\nwinner(1)")
    game.start()
    assert game.show("game") == "active\nwinners: 3, 1"


def test_start_twice_gives_same_starting_state():
    game = _game("deck > players end\ndeck > middle", players=5, extra="stack middle")
    game.start()
    first = (game.show("deck"), game.show("players"), game.show("middle"))
    game.start()
    assert (game.show("deck"), game.show("players"), game.show("middle")) == first


def test_show_simple_keys():
    game = _game("next_player()", extra="current_player 2")
    assert game.show("name") == "test_game"
    assert game.show("current_player") == "2"
    game.start()
    assert game.show("current_player") == "3"


def test_show_custom_stack():
    game = _game("deck > middle\ndeck > middle", extra="stack middle")
    assert game.show("middle") == ""
    game.start()
    assert game.show("middle") == "king diamonds, queen diamonds"


def test_unknown_keys_are_reported_not_raised():
    game = _game("deck > players")
    game.start()
    assert game.show("discard") == "discard not found"
    assert game.show("player 4") == "player 4 not found"
    assert game.show("player x") == "player x not found"


def test_moves_after_game_over_are_ignored():
    source = """players 2
define setup() {
    deck > players end
}
define player_move(player) {
    player:hand > deck
    end()
}
"""
    game = load_game(source)
    game.start()
    game.player_move(1)
    game.player_move(2)
    assert game.show("game") == "game over"
    assert game.show("players") == "player 1 (cards: 25)\nplayer 2 (cards: 26)"


def test_reserved_stack_names_are_not_custom_stacks():
    game = Game([
        Declaration(GlobalKey.PLAYERS, Number(2.0)),
        Declaration(GlobalKey.STACK, Symbol("deck")),
        Declaration(GlobalKey.STACK, Symbol("players")),
        Declaration(GlobalKey.STACK, Symbol("middle")),
    ])
    assert game.runtime.card_stacks == {"middle": []}
    assert game.show("deck").count(", ") == 51


def test_declared_current_player_outside_the_table_is_reset():
    game = _game("deck > players", extra="current_player 7")
    assert game.show("current_player") == "1"
    game.start()
    assert game.show("current_player") == "1"


def test_full_game_from_example_source():
    source = """
.( Everyone plays a card to the middle; the first empty hand wins. )
name snap
players 2
stack middle

define setup() {
    deck > players end
}

define player_move(player) {
    check(player:id is current_player)
    player:hand > middle
    if (count(player:hand) is 0) {
        winner(player:id)
        end()
    }
    next_player()
}
"""
    game = load_game(source)
    game.start()
    game.player_move(2)  # Not this player's turn.
    assert game.show("middle") == ""
    turns = 0
    while game.show("game") == "active":
        game.player_move(int(game.show("current_player")))
        turns += 1
    assert turns == 51
    assert game.show("game") == "game over\nwinners: 1"
    assert len(game.show("middle").split(", ")) == 51

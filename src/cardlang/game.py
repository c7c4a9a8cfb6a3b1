## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import random

from .nodes import GlobalKey, Symbol, Number, Declaration, Definition, Statement
from .parser import parse_source
from .runtime import Runtime, InitialValues, Callbacks, RESERVED_STACKS
from .formatting import format_stack, format_number, format_expression


class Game:
    """Facade that splits a parsed program into declarations and callbacks, and drives a Runtime."""

    def __init__(self, ast: list[Statement], *, seed: int | None = None, rng: random.Random | None = None,
                 verbosity: int = 0, stats: dict | None = None):
        self.name = ""
        self.deck_kind = None
        initial, callbacks = InitialValues(), Callbacks()

        for statement in ast:
            match statement:
                case Declaration(key=GlobalKey.NAME, value=value):
                    self.name = format_expression(value)
                case Declaration(key=GlobalKey.PLAYERS, value=Number(value=n)):
                    initial.players = max(0, int(n))
                case Declaration(key=GlobalKey.CURRENT_PLAYER, value=Number(value=n)):
                    initial.current_player = int(n)
                case Declaration(key=GlobalKey.STACK, value=Symbol(name=name)) if name not in RESERVED_STACKS:
                    initial.card_stacks.append(name)
                case Declaration(key=GlobalKey.DECK, value=Symbol(name=name)):
                    self.deck_kind = name
                case Definition(name="setup"):
                    callbacks.setup = statement
                case Definition(name="player_move"):
                    callbacks.player_move = statement
                case Definition(name=name):
                    callbacks.helpers[name] = statement

        self.runtime = Runtime(initial, callbacks, rng=rng or random.Random(seed), verbosity=verbosity, stats=stats)

    def start(self) -> None:
        self.runtime.setup()

    def player_move(self, player: int) -> None:
        self.runtime.player_move(player)

    def show(self, key: str) -> str:
        rt, key = self.runtime, key.strip()
        match key.split():
            case ["deck"]:
                return format_stack(rt.get_deck())
            case ["name"]:
                return self.name
            case ["players"]:
                return '\n'.join(str(p) for p in rt.get_players())
            case ["game"]:
                winners = rt.get_winners()
                return rt.get_status() + (f"\nwinners: {', '.join(format_number(w) for w in winners)}" if winners else "")
            case ["current_player"]:
                return str(rt.get_current_player())
            case ["player", n] | ["player", n, "hand"] if n.isdigit() and 1 <= int(n) <= len(rt.players):
                return format_stack(rt.get_player(int(n) - 1).get_hand())
        if (stack := rt.find_custom_item(key)) is not None:
            return format_stack(stack)
        return f"{key} not found"


def load_game(source: str, **kwargs) -> Game:
    return Game(parse_source(source), **kwargs)

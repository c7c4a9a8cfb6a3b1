## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import random
from typing import Callable, NamedTuple
from dataclasses import dataclass, field

from .cards import Card, Player, Stack, standard_deck, generate_players
from .nodes import (
    Symbol, Number, Bool, Comparison, And, FunctionCall, Expression,
    Definition, Transfer, IfStatement, CheckStatement, ReturnStatement, Statement,
)
from .types import GameState, PlayerRef, ObjectView, Frame, Value, values_equal
from .transfer import SingleStack, StackList, TransferTarget, transfer
from .builtins import load_builtins
from .formatting import format_statement, format_value


RESERVED_STACKS = ("deck", "players")
DEFAULT_CARD_ARGUMENT = "card"
HAND_ATTRIBUTE = "hand"
MAX_CALL_DEPTH = 64


@dataclass
class InitialValues:
    players: int = 0
    card_stacks: list[str] = field(default_factory=list)
    current_player: int = 1

@dataclass
class Callbacks:
    setup: Definition | None = None
    player_move: Definition | None = None
    helpers: dict[str, Definition] = field(default_factory=dict)


class _Returned(NamedTuple):
    value: Value


class Runtime:
    """Mutable state of one game session, and the evaluator for statements against it."""

    def __init__(self, initial_values: InitialValues, callbacks: Callbacks, *,
                 rng: random.Random | None = None, verbosity: int = 0, stats: dict | None = None):
        self.initial_values = initial_values
        self.callbacks = callbacks
        self.rng = rng or random.Random()
        self.verbosity = verbosity
        self.stats = stats
        self.builtins = load_builtins()

        self.status = GameState.PENDING
        self.deck: Stack = standard_deck()
        self.players: list[Player] = generate_players(initial_values.players)
        self.card_stacks: dict[str, Stack] = {n: [] for n in initial_values.card_stacks if n not in RESERVED_STACKS}
        self.winners: list[float] = []
        self.current_player = self._first_player()
        self.call_stack: list[Frame] = []
        self._depth = 0

    # Lifecycle ───────────────────────────────────────────────────────────────────────────────
    def setup(self) -> None:
        self.deck = standard_deck()
        self.players = generate_players(self.initial_values.players)
        self.card_stacks = {name: [] for name in self.card_stacks}
        self.winners = []
        self.current_player = self._first_player()
        self.call_stack = []
        self.status = GameState.ACTIVE
        if (setup := self.callbacks.setup) is not None:
            self.invoke(setup)

    def player_move(self, player: int) -> None:
        if self.status != GameState.ACTIVE or (p_move := self.callbacks.player_move) is None: return
        if not 1 <= player <= len(self.players): return
        frame = {p_move.arguments[0]: self.build_player_object(player)} if p_move.arguments else None
        self.invoke(p_move, frame)

    def _first_player(self) -> int:
        # The declared player starts only when it names an existing seat.
        n = self.initial_values.current_player
        return n if 1 <= n <= len(self.players) or not self.players else 1

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_builtin(self, name: str, fn: Callable[..., Value | None]) -> None:
        self.builtins[name] = fn

    def find_definition(self, name: str) -> Definition | None:
        if (definition := self.callbacks.helpers.get(name)) is not None: return definition
        for definition in (self.callbacks.setup, self.callbacks.player_move):
            if definition is not None and definition.name == name: return definition
        return None

    # Queries ─────────────────────────────────────────────────────────────────────────────────
    def get_status(self) -> str:
        return self.status.value

    def get_current_player(self) -> int:
        return self.current_player

    def get_deck(self) -> Stack:
        return list(self.deck)

    def get_players(self) -> list[Player]:
        return list(self.players)

    def get_player(self, n: int) -> Player:
        return self.players[n]

    def get_winners(self) -> list[float]:
        return list(self.winners)

    def find_custom_item(self, key: str) -> Stack | None:
        return list(stack) if (stack := self.card_stacks.get(key)) is not None else None

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def invoke(self, definition: Definition, frame: Frame | None = None) -> Value:
        """Run a definition's body, inside `frame` when given, and return its result."""
        if self._depth >= MAX_CALL_DEPTH: return False
        if self.verbosity > 0:
            bound = ', '.join(f"{k}={format_value(v)}" for k, v in (frame or {}).items())
            print(f"\033[97m  ~ {definition.name}\033[0m({bound})")

        if frame is not None: self.call_stack.append(frame)
        self._depth += 1
        try:
            return self.handle_statements(definition.body)
        finally:
            self._depth -= 1
            if frame is not None: self.call_stack.pop()

    def handle_statements(self, statements: tuple[Statement, ...]) -> Value:
        result = self._execute(statements)
        return result.value if result is not None else False

    def _execute(self, statements: tuple[Statement, ...]) -> _Returned | None:
        for statement in statements:
            self._trace(statement)
            match statement:
                case Transfer():
                    self.handle_transfer(statement)
                case FunctionCall():
                    self.call_function(statement)
                case IfStatement(expression=expression, body=body):
                    if self.resolve_to_bool(expression) and (result := self._execute(body)) is not None:
                        return result
                case CheckStatement(expression=expression):
                    if not self.resolve_to_bool(expression): return None
                case ReturnStatement(expression=expression):
                    return _Returned(self.resolve_expression(expression))
        return None

    def _trace(self, statement: Statement) -> None:
        if self.stats is not None:
            self.stats['steps'] = self.stats.get('steps', 0) + 1
        if self.verbosity == 2:
            step = self.stats['steps'] if self.stats is not None else ''
            print(f"\033[90m{step:>3} :\033[0m  {format_statement(statement)}")

    def call_function(self, call: FunctionCall) -> Value | None:
        if (builtin := self.builtins.get(call.name)) is not None:
            return builtin(self, *call.arguments)
        if (definition := self.find_definition(call.name)) is not None:
            values = [self.resolve_expression(a) for a in call.arguments]
            frame = dict(zip(definition.arguments, values)) if definition.arguments else None
            return self.invoke(definition, frame)
        if self.verbosity > 0:
            print(f"\033[33m  ? {call.name}\033[0m is not a known function, ignored.")
        return None

    def filter(self, stack: Stack, definition: Definition) -> Stack:
        """Cards of `stack`, in order, for which the predicate `definition` returns true."""
        name = definition.arguments[0] if definition.arguments else DEFAULT_CARD_ARGUMENT
        return [card for card in stack if self.invoke(definition, {name: self.build_card_object(card)}) is True]

    # Expressions ─────────────────────────────────────────────────────────────────────────────
    def resolve_expression(self, expression: Expression) -> Value:
        match expression:
            case Symbol(name="current_player"):
                return float(self.current_player)
            case Symbol(name=name):
                root, colon, attribute = name.partition(':')
                bound = self.find_in_call_stack(root)
                if colon and isinstance(bound, ObjectView): return self._attribute(bound, attribute)
                if not colon and bound is not None: return bound
                return name
            case FunctionCall():
                return value if (value := self.call_function(expression)) is not None else False
            case Number(value=value):
                return float(value)
            case Bool() | Comparison() | And():
                return self.resolve_to_bool(expression)
        return False

    def resolve_to_bool(self, expression: Expression) -> bool:
        match expression:
            case Bool(value=value):
                return value
            case Comparison(left=left, right=right):
                return values_equal(self.resolve_expression(left), self.resolve_expression(right))
            case And(left=left, right=right):
                return self.resolve_to_bool(left) and self.resolve_to_bool(right)
            case FunctionCall():
                return self.resolve_expression(expression) is True
        return False

    def _attribute(self, view: ObjectView, name: str) -> Value:
        # Player views read through to the live player, so `hand` reflects earlier transfers.
        if isinstance(view.ref, PlayerRef) and view.ref.index < len(self.players):
            view = self.build_player_object(view.ref.index + 1)
        return view.get(name, False)

    def find_in_call_stack(self, key: str):
        for frame in reversed(self.call_stack):
            if key in frame: return frame[key]
        return None

    def build_player_object(self, n: int) -> ObjectView:
        player = self.players[n - 1]
        return ObjectView({'id': float(n), 'hand': player.get_hand()}, ref=PlayerRef(n - 1))

    def build_card_object(self, card: Card) -> ObjectView:
        return ObjectView({'rank': card.rank.value, 'suit': card.suit.value})

    # Stacks ──────────────────────────────────────────────────────────────────────────────────
    def locate_stack(self, key: str, *, follow_alias: bool = True) -> tuple | None:
        """Address of the stack a symbolic reference names, e.g. `('player', 0)` for `player:hand`."""
        root, _, attribute = key.partition(':')
        if attribute not in ('', HAND_ATTRIBUTE): return None
        if root in RESERVED_STACKS: return (root,)
        if root in self.card_stacks: return ('stack', root)
        match self.find_in_call_stack(root):
            case ObjectView(ref=PlayerRef(index=index)) if index < len(self.players):
                return ('player', index)
            case str() as alias if follow_alias and alias != key:
                return self.locate_stack(alias, follow_alias=False)
        return None

    def get_stack(self, key: str) -> TransferTarget | None:
        match self.locate_stack(key):
            case ('deck',): return SingleStack(self.deck)
            case ('players',): return StackList([p.hand for p in self.players])
            case ('stack', name): return SingleStack(self.card_stacks[name])
            case ('player', index): return SingleStack(self.players[index].hand)
        return None

    def set_stack(self, key: str, target: TransferTarget) -> None:
        match self.locate_stack(key):
            case ('deck',): self.deck = target.get_stack(0)
            case ('players',):
                for n, player in enumerate(self.players):
                    player.set_hand(target.get_stack(n))
            case ('stack', name): self.card_stacks[name] = target.get_stack(0)
            case ('player', index): self.players[index].set_hand(target.get_stack(0))

    def handle_transfer(self, t: Transfer) -> None:
        source_at, target_at = self.locate_stack(t.source), self.locate_stack(t.target)
        if source_at is None or target_at is None or source_at == target_at: return

        if (result := transfer(self.get_stack(t.source), self.get_stack(t.target), t.count)) is None: return
        new_source, new_target = result
        self.set_stack(t.source, new_source)
        self.set_stack(t.target, new_target)

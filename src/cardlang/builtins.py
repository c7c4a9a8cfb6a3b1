## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Built-in functions of the card language.  Each `op_` function receives the runtime and
# the unevaluated argument expressions, and returns a value or None.
#

import sys
from typing import Callable

from .nodes import Symbol, Expression
from .types import GameState, Value


def _stack_key(rt, expr: Expression) -> str | None:
    if isinstance(expr, Symbol): return expr.name
    return value if isinstance(value := rt.resolve_expression(expr), str) else None

def _stack_cards(rt, expr: Expression) -> list:
    """Cards named by `expr`: a stack name, a bound player, or a value that already is a stack."""
    if isinstance(expr, Symbol) and (target := rt.get_stack(expr.name)) is not None:
        return [card for stack in target.all_stacks() for card in stack]
    value = rt.resolve_expression(expr)
    if isinstance(value, list): return value
    if isinstance(value, str) and (target := rt.get_stack(value)) is not None:
        return [card for stack in target.all_stacks() for card in stack]
    return []


## GAME FLOW
def op_end(rt, *_) -> None:
    rt.status = GameState.GAME_OVER

def op_winner(rt, player: Expression | None = None, *_) -> None:
    if player is None: return
    if isinstance(value := rt.resolve_expression(player), float):
        rt.winners.append(value)

def op_next_player(rt, *_) -> None:
    rt.current_player = rt.current_player + 1 if rt.current_player < len(rt.players) else 1

## STACKS
def op_shuffle(rt, stack: Expression | None = None, *_) -> None:
    key = _stack_key(rt, stack) if stack is not None else "deck"
    if key is None or (target := rt.get_stack(key)) is None: return
    for cards in target.all_stacks():
        rt.rng.shuffle(cards)
    rt.set_stack(key, target)

def op_count(rt, stack: Expression | None = None, *_) -> float:
    if stack is None: return 0.0
    return float(len(_stack_cards(rt, stack)))

def op_filter(rt, stack: Expression | None = None, predicate: Expression | None = None, *_) -> list:
    if stack is None or not isinstance(predicate, Symbol): return []
    if (definition := rt.find_definition(predicate.name)) is None: return []
    return rt.filter(_stack_cards(rt, stack), definition)


def get_builtin_name(py_name: str) -> str:
    assert py_name.startswith('op_'), f"Built-in function `{py_name}` requires prefix `op_` by convention."
    return py_name[3:]


def load_builtins() -> dict[str, Callable[..., Value | None]]:
    module = sys.modules[__name__]
    return {get_builtin_name(k): getattr(module, k) for k in dir(module) if k.startswith('op_')}

## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from enum import Enum
from dataclasses import dataclass, field

from .cards import Card


class GameState(Enum):
    PENDING = "pending"
    ACTIVE = "active"
    GAME_OVER = "game over"


@dataclass(frozen=True)
class PlayerRef:
    """Back-reference from a bound argument to the canonical player at `index` (0-based)."""
    index: int


@dataclass
class ObjectView:
    """Attribute bag bound into a call frame for a player or a card."""
    attributes: dict[str, "Value"] = field(default_factory=dict)
    ref: PlayerRef | None = None

    def get(self, name: str, default=False):
        return self.attributes.get(name, default)


# Results of expression evaluation: Bool, Number, Stack, String.
Value = bool | float | list[Card] | str

# Anything that can be bound under a name in a call frame.
Bound = Value | ObjectView

Frame = dict[str, Bound]


def values_equal(a, b) -> bool:
    """Structural equality; values of different kinds never compare equal."""
    return type(a) is type(b) and a == b

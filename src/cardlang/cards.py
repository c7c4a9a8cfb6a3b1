## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from enum import Enum
from dataclasses import dataclass, field


class Suit(Enum):
    SPADES = "spades"
    HEARTS = "hearts"
    CLUBS = "clubs"
    DIAMONDS = "diamonds"

class Rank(Enum):
    ACE = "ace"
    TWO = "two"
    THREE = "three"
    FOUR = "four"
    FIVE = "five"
    SIX = "six"
    SEVEN = "seven"
    EIGHT = "eight"
    NINE = "nine"
    TEN = "ten"
    JACK = "jack"
    QUEEN = "queen"
    KING = "king"


@dataclass(frozen=True)
class Card:
    rank: Rank
    suit: Suit

    def __str__(self):
        return f"{self.rank.value} {self.suit.value}"


# Ordered bottom to top; the last card is the top of the stack.
Stack = list[Card]


def standard_deck() -> Stack:
    """All 52 cards, suit-major in spades, hearts, clubs, diamonds order and ace to king within each."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


@dataclass
class Player:
    id: int
    hand: Stack = field(default_factory=list)

    def get_id(self) -> int:
        return self.id

    def get_hand(self) -> Stack:
        return list(self.hand)

    def set_hand(self, hand: Stack) -> None:
        self.hand = list(hand)

    def __str__(self):
        return f"player {self.id} (cards: {len(self.hand)})"


def generate_players(count: int) -> list[Player]:
    return [Player(i + 1) for i in range(count)]

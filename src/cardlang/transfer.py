## cardlang — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Card movement between stacks.  Targets wrap the runtime's own lists, are mutated in place,
# and are handed back to the runtime for writing into the canonical game state.
#

from dataclasses import dataclass

from .cards import Card, Stack
from .nodes import TransferCount


@dataclass
class SingleStack:
    cards: Stack

    def count(self) -> int:
        return len(self.cards)

    def total(self) -> int:
        return len(self.cards)

    def get_stack(self, n: int) -> Stack:
        return self.cards

    def all_stacks(self) -> list[Stack]:
        return [self.cards]

@dataclass
class StackList:
    """One stack per player, in player order; used for broadcast deals and collection."""
    stacks: list[Stack]

    def count(self) -> int:
        return len(self.stacks)

    def total(self) -> int:
        return sum(len(s) for s in self.stacks)

    def get_stack(self, n: int) -> Stack:
        return self.stacks[n]

    def all_stacks(self) -> list[Stack]:
        return list(self.stacks)


TransferTarget = SingleStack | StackList


def _pop_card(source: TransferTarget, index: int) -> tuple[Card | None, int]:
    """Pop from the top of `source`; a StackList yields round-robin, skipping empty stacks."""
    if isinstance(source, SingleStack):
        return (source.cards.pop() if source.cards else None), index
    for _ in range(len(source.stacks)):
        stack, index = source.stacks[index], (index + 1) % len(source.stacks)
        if stack: return stack.pop(), index
    return None, index


def _push_card(target: TransferTarget, card: Card, index: int) -> int:
    if isinstance(target, SingleStack):
        target.cards.append(card)
        return index
    target.stacks[index].append(card)
    return (index + 1) % len(target.stacks)


def transfer(source: TransferTarget | None, target: TransferTarget | None,
             count: TransferCount | None = None) -> tuple[TransferTarget, TransferTarget] | None:
    """Move cards one at a time from the top of `source` onto `target`.

    Without a count a single card moves per target stack; `end` drains the source.  A
    StackList target receives cards round-robin, so `deck > players end` deals the whole
    deck as evenly as it divides.  Running out of cards stops the transfer early.
    """
    if source is None or target is None: return None

    units = source.total() if count == TransferCount.END else 1
    if isinstance(target, StackList): units *= target.count()
    if count is None and isinstance(source, StackList): units *= source.count()

    source_index = target_index = 0
    while units > 0:
        card, source_index = _pop_card(source, source_index)
        if card is None: break
        target_index = _push_card(target, card, target_index)
        units -= 1

    return source, target

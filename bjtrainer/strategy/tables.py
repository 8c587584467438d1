"""Basic strategy lookup tables."""

from typing import Mapping

from bjtrainer.cards import Card
from bjtrainer.game.actions import PlayerAction

# Dealer upcards are keyed by value: 2-10, Ace = 11
DealerUpcard = int
StrategyTable = Mapping[tuple[int, DealerUpcard], PlayerAction]

UPCARDS = range(2, 12)


def upcard_value(card: Card) -> DealerUpcard:
    """Return the lookup value of a dealer upcard (Ace = 11)."""
    return card.value


def build_hard_table() -> StrategyTable:
    """Hit or stand for hard totals 4-21."""
    H = PlayerAction.HIT
    S = PlayerAction.STAND
    table: dict[tuple[int, int], PlayerAction] = {}

    # Hard 4-11: can't bust
    for total in range(4, 12):
        for dealer in UPCARDS:
            table[(total, dealer)] = H

    # Hard 12: stand only vs 4-6
    for dealer in UPCARDS:
        table[(12, dealer)] = S if 4 <= dealer <= 6 else H

    # Hard 13-16: stand vs 2-6
    for total in range(13, 17):
        for dealer in UPCARDS:
            table[(total, dealer)] = S if dealer <= 6 else H

    # Hard 17+
    for total in range(17, 22):
        for dealer in UPCARDS:
            table[(total, dealer)] = S

    return table


def build_soft_table() -> StrategyTable:
    """Hit or stand for soft totals 13-21; doubling is checked separately."""
    H = PlayerAction.HIT
    S = PlayerAction.STAND
    table: dict[tuple[int, int], PlayerAction] = {}

    # A,2 through A,6
    for total in range(13, 18):
        for dealer in UPCARDS:
            table[(total, dealer)] = H

    # A,7: stand vs 2-8, hit vs 9, 10, A
    for dealer in UPCARDS:
        table[(18, dealer)] = S if dealer <= 8 else H

    for total in range(19, 22):
        for dealer in UPCARDS:
            table[(total, dealer)] = S

    return table


def build_pair_table(double_after_split: bool = True) -> StrategyTable:
    """
    Split, hit or stand for pairs keyed by card value (Ace = 11).

    Fives are left out; a pair of fives is played as hard 10.
    Without double-after-split the low pairs split against fewer upcards.
    """
    H = PlayerAction.HIT
    S = PlayerAction.STAND
    P = PlayerAction.SPLIT
    table: dict[tuple[int, int], PlayerAction] = {}

    def split_against(pair: int, dealers: range | list[int], otherwise: PlayerAction) -> None:
        for dealer in UPCARDS:
            table[(pair, dealer)] = P if dealer in dealers else otherwise

    # Always split Aces and 8s
    split_against(11, UPCARDS, H)
    split_against(8, UPCARDS, H)

    if double_after_split:
        split_against(2, range(2, 8), H)
        split_against(3, range(2, 8), H)
        split_against(4, [5, 6], H)
        split_against(6, range(2, 7), H)
    else:
        split_against(2, range(4, 8), H)
        split_against(3, range(4, 8), H)
        split_against(4, [], H)
        split_against(6, range(3, 7), H)

    split_against(7, range(2, 8), H)
    # 9s stand vs 7, 10 and A
    split_against(9, [2, 3, 4, 5, 6, 8, 9], S)
    # Never split 10s
    split_against(10, [], S)

    return table


def should_double(total: int, is_soft: bool, dealer: DealerUpcard, hits_soft_17: bool = False) -> bool:
    """Whether a two-card hand should double against the upcard."""
    if not is_soft:
        if total == 9:
            return 3 <= dealer <= 6
        if total == 10:
            return 2 <= dealer <= 9
        return total == 11

    if total in (13, 14):
        return dealer in (5, 6)
    if total in (15, 16):
        return 4 <= dealer <= 6
    if total == 17:
        return 3 <= dealer <= 6
    if total == 18:
        return (2 if hits_soft_17 else 3) <= dealer <= 6
    if total == 19:
        return hits_soft_17 and dealer == 6
    return False


def should_surrender(total: int, dealer: DealerUpcard, hits_soft_17: bool = False) -> bool:
    """Whether a two-card hard total should surrender against the upcard."""
    if total == 16:
        return dealer >= 9
    if total == 15:
        return dealer == 10 or (hits_soft_17 and dealer == 11)
    return False

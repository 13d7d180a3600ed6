"""
Hand Evaluation for Texas Hold'em.

This module evaluates up to 7 cards (2 hole + up to 5 community) and returns
the best 5-card hand. Scores are plain integers where a higher score always
beats a lower one and equal scores are exact ties.

Hand Rankings (best to worst):
1. Straight Flush: 5 consecutive cards of same suit (ace high = royal flush)
2. Four of a Kind: 4 cards of same rank
3. Full House: 3 of a kind + pair
4. Flush: 5 cards of same suit
5. Straight: 5 consecutive cards
6. Three of a Kind: 3 cards of same rank
7. Two Pair: 2 different pairs
8. One Pair: 2 cards of same rank
9. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel).
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

from pokertable.core.card import Card, Rank
from pokertable.core.rules import HAND_SIZE


class HandRank(IntEnum):
    """Hand categories, higher value = better hand."""
    STRAIGHT_FLUSH = 9
    FOUR_OF_A_KIND = 8
    FULL_HOUSE = 7
    FLUSH = 6
    STRAIGHT = 5
    THREE_OF_A_KIND = 4
    TWO_PAIR = 3
    ONE_PAIR = 2
    HIGH_CARD = 1


# Hand rank names for display
HAND_RANK_NAMES = {
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FLUSH: "Flush",
    HandRank.STRAIGHT: "Straight",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.ONE_PAIR: "One Pair",
    HandRank.HIGH_CARD: "High Card",
}

INCOMPLETE_NAME = "Incomplete"
WAITING_NAME = "Waiting"

# Ranks are 2..14, so base 15 keeps every kicker position distinct.
# Score = hand_rank * CATEGORY_WEIGHT + kicker_value
KICKER_BASE = 15
CATEGORY_WEIGHT = KICKER_BASE ** HAND_SIZE


@dataclass(frozen=True)
class HandEvaluation:
    """
    Result of evaluating a seat's cards.

    Attributes:
        score: Comparable strength, higher is better; 0 for incomplete hands
        category_name: Display name of the category
        hand_rank: Category, or None when fewer than 5 cards were given
        best_cards: The 5 cards making the hand (empty when incomplete)
    """
    score: int
    category_name: str
    hand_rank: Optional[HandRank] = None
    best_cards: Tuple[Card, ...] = ()

    @property
    def is_complete(self) -> bool:
        return self.hand_rank is not None


def evaluate(
    hole_cards: Sequence[Card],
    community_cards: Sequence[Card] = (),
) -> HandEvaluation:
    """
    Evaluate a seat's hole cards together with the board.

    With fewer than 5 cards in total the result is a display-only
    placeholder with score 0; it must not be used to compare hands.
    """
    cards = list(hole_cards) + list(community_cards)
    if not cards:
        return HandEvaluation(0, WAITING_NAME)
    if len(cards) < HAND_SIZE:
        return HandEvaluation(0, INCOMPLETE_NAME)

    score, hand_rank, best_cards = evaluate_hand(cards)
    return HandEvaluation(score, HAND_RANK_NAMES[hand_rank], hand_rank, tuple(best_cards))


def evaluate_hand(cards: Sequence[Card]) -> Tuple[int, HandRank, List[Card]]:
    """
    Evaluate a poker hand (5-7 cards).

    Returns:
        Tuple of:
        - score: Higher is better
        - hand_type: HandRank enum value
        - best_cards: The 5 cards that make the best hand

    Raises:
        ValueError: If not 5-7 cards provided, or a card is repeated
    """
    if len(cards) < 5 or len(cards) > 7:
        raise ValueError(f"Need 5-7 cards, got {len(cards)}")
    if len(set(cards)) != len(cards):
        raise ValueError("Duplicate cards in hand")

    best: Optional[Tuple[int, HandRank, List[Card]]] = None
    for combo in combinations(cards, HAND_SIZE):
        result = _evaluate_5_cards(list(combo))
        if best is None or result[0] > best[0]:
            best = result

    return best


def _evaluate_5_cards(cards: List[Card]) -> Tuple[int, HandRank, List[Card]]:
    """Evaluate exactly 5 cards."""
    sorted_cards = sorted(cards, key=lambda c: c.rank, reverse=True)
    ranks = [c.rank for c in sorted_cards]

    is_flush = len({c.suit for c in sorted_cards}) == 1
    straight_high = _straight_high(ranks)

    rank_counts = Counter(ranks)
    # Ranks ordered by (count, rank): quads/trips/pairs first, then kickers
    grouped = sorted(rank_counts, key=lambda r: (rank_counts[r], r), reverse=True)
    counts = [rank_counts[r] for r in grouped]

    if straight_high is not None and is_flush:
        return _score(HandRank.STRAIGHT_FLUSH, [straight_high]), HandRank.STRAIGHT_FLUSH, _straight_order(sorted_cards, straight_high)

    if counts == [4, 1]:
        hand_type = HandRank.FOUR_OF_A_KIND
    elif counts == [3, 2]:
        hand_type = HandRank.FULL_HOUSE
    elif is_flush:
        return _score(HandRank.FLUSH, ranks), HandRank.FLUSH, sorted_cards
    elif straight_high is not None:
        return _score(HandRank.STRAIGHT, [straight_high]), HandRank.STRAIGHT, _straight_order(sorted_cards, straight_high)
    elif counts == [3, 1, 1]:
        hand_type = HandRank.THREE_OF_A_KIND
    elif counts == [2, 2, 1]:
        hand_type = HandRank.TWO_PAIR
    elif counts == [2, 1, 1, 1]:
        hand_type = HandRank.ONE_PAIR
    else:
        return _score(HandRank.HIGH_CARD, ranks), HandRank.HIGH_CARD, sorted_cards

    ordered = sorted(sorted_cards, key=lambda c: (rank_counts[c.rank], c.rank), reverse=True)
    return _score(hand_type, grouped), hand_type, ordered


def _straight_high(ranks: List[Rank]) -> Optional[Rank]:
    """High card of a straight formed by 5 ranks, or None."""
    unique_ranks = sorted(set(ranks), reverse=True)
    if len(unique_ranks) != 5:
        return None

    if unique_ranks[0] - unique_ranks[4] == 4:
        return unique_ranks[0]

    # Wheel (A-2-3-4-5)
    if unique_ranks == [Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO]:
        return Rank.FIVE

    return None


def _straight_order(cards: List[Card], straight_high: Rank) -> List[Card]:
    """Order straight cards high to low, ace last in a wheel."""
    if straight_high != Rank.FIVE:
        return cards
    ace = [c for c in cards if c.rank == Rank.ACE]
    others = [c for c in cards if c.rank != Rank.ACE]
    return others + ace


def _score(hand_type: HandRank, kicker_ranks: Sequence[Rank]) -> int:
    """
    Combine the category with its relevant ranks into a single integer.

    Kickers are packed most significant first, so a higher category always
    wins and, within a category, the first differing relevant rank decides.
    """
    kicker_value = 0
    for rank in kicker_ranks:
        kicker_value = kicker_value * KICKER_BASE + int(rank)
    # Left-align so hands with fewer relevant ranks compare on equal footing
    kicker_value *= KICKER_BASE ** (HAND_SIZE - len(kicker_ranks))
    return int(hand_type) * CATEGORY_WEIGHT + kicker_value


def compare_hands(cards1: Sequence[Card], cards2: Sequence[Card]) -> int:
    """
    Compare two hands.

    Returns:
        1 if cards1 wins, -1 if cards2 wins, 0 if tie
    """
    score1, _, _ = evaluate_hand(cards1)
    score2, _, _ = evaluate_hand(cards2)

    if score1 > score2:
        return 1
    elif score1 < score2:
        return -1
    return 0


def describe_hand(cards: Sequence[Card]) -> str:
    """Get a human-readable description of the hand."""
    if len(cards) < HAND_SIZE:
        return "Incomplete hand"

    _, hand_type, best_cards = evaluate_hand(cards)
    rank_counts = Counter(c.rank for c in best_cards)

    if hand_type == HandRank.STRAIGHT_FLUSH:
        high = best_cards[0].rank
        if high == Rank.ACE:
            return "Royal Flush"
        return f"Straight Flush, {_rank_name(high)} high"
    elif hand_type == HandRank.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(best_cards[0].rank)}"
    elif hand_type == HandRank.FULL_HOUSE:
        return f"Full House, {_plural(best_cards[0].rank)} full of {_plural(best_cards[-1].rank)}"
    elif hand_type == HandRank.FLUSH:
        return f"Flush, {_rank_name(best_cards[0].rank)} high"
    elif hand_type == HandRank.STRAIGHT:
        if best_cards[0].rank == Rank.FIVE:
            return "Straight, Five high (Wheel)"
        return f"Straight, {_rank_name(best_cards[0].rank)} high"
    elif hand_type == HandRank.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(best_cards[0].rank)}"
    elif hand_type == HandRank.TWO_PAIR:
        pairs = sorted([r for r, c in rank_counts.items() if c == 2], reverse=True)
        return f"Two Pair, {_plural(pairs[0])} and {_plural(pairs[1])}"
    elif hand_type == HandRank.ONE_PAIR:
        return f"Pair of {_plural(best_cards[0].rank)}"
    return f"High Card, {_rank_name(best_cards[0].rank)}"


_RANK_NAMES = {
    Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
    Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
    Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
    Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
    Rank.ACE: "Ace",
}


def _rank_name(rank: Rank) -> str:
    return _RANK_NAMES[rank]


def _plural(rank: Rank) -> str:
    return "Sixes" if rank == Rank.SIX else f"{_RANK_NAMES[rank]}s"

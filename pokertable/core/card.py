"""
Card and Deck types for Texas Hold'em.

Cards are immutable values compared by (rank, suit). The deck is an immutable
ordered tuple: dealing returns the dealt cards together with a new, shorter
deck, so a table state holding a deck never changes underneath an observer.
"""

from __future__ import annotations
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Sequence, Tuple

from pokertable.core.errors import DeckExhausted


class Suit(Enum):
    """Card suits."""
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


class Rank(IntEnum):
    """Card ranks valued 2 (lowest) to 14 (Ace)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.CLUBS: "c",
    Suit.DIAMONDS: "d",
    Suit.HEARTS: "h",
    Suit.SPADES: "s",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_RANK["T"] = Rank.TEN  # Also accept "T"
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}

DECK_SIZE = 52


@dataclass(frozen=True)
class Card:
    """
    A playing card.

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("10h"),
      Card.from_string("T♥")
    """

    rank: Rank
    suit: Suit

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts a rank ("2".."10", "T", "J", "Q", "K", "A") followed by a
        suit char ("h", "d", "c", "s") or symbol.
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_part = s[:-1].upper()
        suit_part = s[-1]

        if rank_part not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_part}")

        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(CHAR_TO_RANK[rank_part], suit)

    @property
    def id(self) -> str:
        """Stable identifier like '10-hearts'."""
        return f"{RANK_CHARS[self.rank]}-{self.suit.value}"

    @property
    def short_str(self) -> str:
        """Short string like 'As', '10h'."""
        return f"{RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]}"

    @property
    def color(self) -> str:
        """Return 'red' for hearts/diamonds, 'black' for clubs/spades."""
        return "red" if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "rank": RANK_CHARS[self.rank],
            "suit": self.suit.value,
            "text": str(self),
            "color": self.color,
        }

    def __repr__(self) -> str:
        return f"Card({self.short_str})"

    def __str__(self) -> str:
        return f"{RANK_CHARS[self.rank]}{SUIT_SYMBOLS[self.suit]}"


def full_card_set() -> List[Card]:
    """All 52 cards in suit-then-rank order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


@dataclass(frozen=True)
class Deck:
    """
    The undealt part of a 52-card deck, dealt from the front.

    Usage:
        deck = Deck.new_shuffled()
        hole_cards, deck = deck.draw(2)
        deck = deck.burn()
        flop, deck = deck.draw(3)
    """

    cards: Tuple[Card, ...] = ()

    @classmethod
    def new_shuffled(cls, rng: Optional[random.Random] = None) -> Deck:
        """
        Build all 52 cards in a uniformly random order.

        random.Random.shuffle is a Fisher-Yates shuffle; pass a seeded
        ``rng`` for reproducible deals.
        """
        cards = full_card_set()
        (rng or random).shuffle(cards)
        return cls(tuple(cards))

    @classmethod
    def stacked(cls, cards: Sequence[Card]) -> Deck:
        """Build a deck with a predetermined order (testing, replays)."""
        if len(set(cards)) != len(cards):
            raise ValueError("Stacked deck contains duplicate cards")
        return cls(tuple(cards))

    def draw(self, n: int = 1) -> Tuple[List[Card], Deck]:
        """
        Remove the first ``n`` cards.

        Raises:
            DeckExhausted: If fewer than ``n`` cards remain.
        """
        if n > len(self.cards):
            raise DeckExhausted(f"Cannot deal {n} cards, only {len(self.cards)} remain")
        return list(self.cards[:n]), Deck(self.cards[n:])

    def burn(self) -> Deck:
        """Discard the top card."""
        _, deck = self.draw(1)
        return deck

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse space-separated cards, e.g. "As Kh 10d" or "A♠ K♥ T♦".
    """
    return [Card.from_string(s) for s in cards_str.split()]

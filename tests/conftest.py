"""
Pytest configuration and shared fixtures for pokertable tests.
"""

import random

import pytest
from pokertable.core.card import Card, Deck, Rank, Suit, full_card_set, parse_cards
from pokertable.core.game import new_table
from pokertable.core.player import create_seats


@pytest.fixture
def rng():
    """Seeded random source for reproducible deals."""
    return random.Random(1234)


@pytest.fixture
def deck(rng):
    """Create a fresh shuffled deck."""
    return Deck.new_shuffled(rng)


@pytest.fixture
def three_seat_table():
    """3 seats with 1000 chips each, blinds 25/50, waiting for a hand."""
    seats = create_seats(["Alice", "Bob", "Carol"], 1000, automated=[False, False, False])
    return new_table(seats, small_blind=25, big_blind=50)


@pytest.fixture
def heads_up_table():
    """2 seats with 1000 chips each, blinds 25/50."""
    seats = create_seats(["Alice", "Bob"], 1000, automated=[False, False])
    return new_table(seats, small_blind=25, big_blind=50)


@pytest.fixture
def make_deck():
    """
    Factory for a stacked deck.

    Hole cards are given in deal order (clockwise from the small blind, two
    cards per seat). The board is dealt with a burn card before the flop,
    turn and river; missing board cards and burns are filled from the unused
    cards.
    """
    def _make(holes, board=""):
        hole_cards = [c for h in holes for c in parse_cards(h)]
        board_cards = parse_cards(board)
        used = set(hole_cards) | set(board_cards)
        filler = [c for c in full_card_set() if c not in used]

        while len(board_cards) < 5:
            board_cards.append(filler.pop())

        order = list(hole_cards)
        order += [filler.pop()] + board_cards[:3]
        order += [filler.pop()] + board_cards[3:4]
        order += [filler.pop()] + board_cards[4:5]
        order += filler
        return Deck.stacked(order)

    return _make


@pytest.fixture
def sample_hand():
    """Create a sample 5-card hand (pair of aces)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.KING, Suit.DIAMONDS),
        Card(Rank.QUEEN, Suit.CLUBS),
        Card(Rank.JACK, Suit.SPADES),
    ]


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]

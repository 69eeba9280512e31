"""Tests for round cards and outcome wagers."""

import pytest

from errors import DuplicateWager, ResourceExhausted
from models import OutcomeKind
from wagers import (
    available_round_cards,
    claim_outcome_wager,
    claim_round_card,
    claimed_round_cards,
    make_round_cards,
    reset_round_cards,
)


def test_fresh_deck_has_four_cards_per_color():
    cards = make_round_cards()
    assert len(cards) == 20
    assert sorted(c.value for c in cards if c.color == "Red") == [2, 2, 3, 5]
    assert len({c.id for c in cards}) == 20


def test_round_cards_are_granted_highest_first(game):
    players = game.players
    values = [claim_round_card(game, players[i % 3], "Green").value for i in range(4)]

    assert values == [5, 3, 2, 2]
    assert available_round_cards(game, "Green") == []
    with pytest.raises(ResourceExhausted):
        claim_round_card(game, players[0], "Green")


def test_claimed_card_is_recorded_on_player(game):
    player = game.player("p2")
    card = claim_round_card(game, player, "Red")
    assert card.holder_id == "p2"
    assert player.round_cards == [card]
    assert len(available_round_cards(game, "Red")) == 3


def test_outcome_wagers_number_submissions_per_color_and_kind(game):
    p1, p2, p3 = game.players
    first = claim_outcome_wager(game, p1, "Blue", OutcomeKind.CHAMPION)
    second = claim_outcome_wager(game, p2, "Blue", OutcomeKind.CHAMPION)
    loser = claim_outcome_wager(game, p3, "Blue", OutcomeKind.LOSER)

    assert (first.submission_order, second.submission_order) == (1, 2)
    assert loser.submission_order == 1
    assert p1.champion_colors == ["Blue"]
    assert p3.loser_colors == ["Blue"]


def test_one_outcome_wager_per_color(game):
    player = game.player("p1")
    claim_outcome_wager(game, player, "Green", OutcomeKind.CHAMPION)

    with pytest.raises(DuplicateWager):
        claim_outcome_wager(game, player, "Green", OutcomeKind.LOSER)
    with pytest.raises(DuplicateWager):
        claim_outcome_wager(game, player, "Green", OutcomeKind.CHAMPION)

    assert len(game.outcome_wagers) == 1
    assert set(player.champion_colors).isdisjoint(player.loser_colors)


def test_claimed_round_cards_follow_holders_until_reset(game):
    p1, p2, _ = game.players
    assert claimed_round_cards(game) == []

    claim_round_card(game, p2, "Blue")
    claim_round_card(game, p1, "Red")

    claimed = claimed_round_cards(game)
    assert [(c.color, c.value, c.holder_id) for c in claimed] == [("Red", 5, "p1"), ("Blue", 5, "p2")]

    reset_round_cards(game)
    assert claimed_round_cards(game) == []

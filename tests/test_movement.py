"""Tests for piece movement, stacking, tiles and ranking."""

import random

from conftest import add_modifier, assert_dense_stacks, set_board
from game_logic import leading_color, rank_racing_pieces, resolve_move, stacks
from models import CoinSource, ModifierKind


def test_accelerate_tile_pushes_forward_and_pays_owner(game):
    set_board(game, {2: ["Red"], 1: ["Yellow", "Blue", "Purple", "Green"], 14: ["Black"], 15: ["White"]})
    add_modifier(game, "p2", 3, ModifierKind.ACCELERATE)
    owner = game.player("p2")

    move = resolve_move(game, "Red", 1)

    assert move.destination == 4
    assert game.pieces["Red"].position == 4
    assert move.modifier is not None and move.modifier.owner_id == "p2"
    assert owner.coin_balance == 1
    assert owner.coin_ledger[-1].source == CoinSource.TILE_REWARD
    assert owner.coin_ledger[-1].amount == 1


def test_decelerate_tile_pulls_forward_piece_back(game):
    add_modifier(game, "p1", 7, ModifierKind.DECELERATE)

    move = resolve_move(game, "Green", 2)

    assert move.destination == 6
    assert game.player("p1").coin_balance == 1


def test_tile_effect_is_mirrored_for_reverse_pieces(game):
    set_board(game, {1: ["Red", "Yellow", "Blue", "Purple", "Green"], 10: ["Black"], 12: ["White"]})
    add_modifier(game, "p1", 8, ModifierKind.ACCELERATE)
    add_modifier(game, "p2", 10, ModifierKind.DECELERATE)

    # Accelerate sends a reverse piece one further backwards.
    assert resolve_move(game, "Black", 2).destination == 7
    # Decelerate holds it back by one.
    assert resolve_move(game, "White", 2).destination == 11
    assert game.player("p1").coin_balance == 1
    assert game.player("p2").coin_balance == 1


def test_moving_piece_carries_everything_above_it(game):
    set_board(game, {5: ["Red", "Blue", "Green"], 7: ["Yellow"], 1: ["Purple"], 14: ["Black"], 15: ["White"]})

    move = resolve_move(game, "Blue", 2)

    assert move.moved_block == ["Blue", "Green"]
    assert stacks(game)[5] == ["Red"]
    assert stacks(game)[7] == ["Yellow", "Blue", "Green"]
    assert game.pieces["Red"].stack_order == 0
    assert_dense_stacks(game)


def test_reverse_piece_carries_racers_backwards(game):
    set_board(game, {10: ["Black", "Red"], 8: ["Yellow"], 1: ["Blue", "Purple", "Green"], 15: ["White"]})

    resolve_move(game, "Black", 2)

    assert stacks(game)[8] == ["Yellow", "Black", "Red"]
    assert 10 not in stacks(game)


def test_racer_below_reverse_piece_pushes_it_forward(game):
    set_board(game, {6: ["Red", "White"], 1: ["Yellow", "Blue", "Purple", "Green"], 14: ["Black"]})

    resolve_move(game, "Red", 3)

    assert stacks(game)[9] == ["Red", "White"]


def test_positions_are_clamped_to_track(game):
    set_board(game, {15: ["Red"], 1: ["Yellow", "Blue", "Purple", "Green"], 2: ["Black"], 14: ["White"]})

    forward = resolve_move(game, "Red", 3)
    backward = resolve_move(game, "Black", 3)

    assert forward.destination == 16
    assert forward.finished
    assert backward.destination == 1
    assert stacks(game)[1] == ["Yellow", "Blue", "Purple", "Green", "Black"]


def test_bounce_back_onto_own_cell_keeps_stack(game):
    set_board(game, {5: ["Red", "Yellow"], 1: ["Blue", "Purple", "Green"], 14: ["Black"], 15: ["White"]})
    add_modifier(game, "p3", 6, ModifierKind.DECELERATE)

    move = resolve_move(game, "Yellow", 1)

    assert move.destination == 5
    assert stacks(game)[5] == ["Red", "Yellow"]
    assert game.player("p3").coin_balance == 1


def test_not_finished_before_threshold(game):
    assert not resolve_move(game, "Green", 3).finished


def test_stacks_stay_dense_over_random_moves(game):
    rng = random.Random(99)
    add_modifier(game, "p1", 6, ModifierKind.ACCELERATE)
    add_modifier(game, "p2", 10, ModifierKind.DECELERATE)
    for _ in range(300):
        color = rng.choice(list(game.pieces))
        resolve_move(game, color, rng.choice([1, 2, 3]))
        assert_dense_stacks(game)


def test_ranking_uses_stack_height_on_ties(game):
    set_board(game, {10: ["Yellow", "Black", "Red"], 9: ["Blue"], 1: ["Purple", "Green"], 15: ["White"]})

    ranking = rank_racing_pieces(game)

    assert ranking[:3] == ["Red", "Yellow", "Blue"]
    assert ranking[-1] == "Purple"
    assert "Black" not in ranking


def test_leader_is_top_of_the_front_stack(game):
    set_board(game, {10: ["Red", "Green"], 9: ["Yellow"], 4: ["Blue"], 2: ["Purple"], 12: ["Black"], 15: ["White"]})

    assert leading_color(game) == "Green"
    assert leading_color(game) == rank_racing_pieces(game)[0]

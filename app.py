"""
Main Streamlit application: a hot-seat table driving the race engine.
"""

import logging
import time

import streamlit as st

from config import (
    MAX_PLAYERS,
    MIN_PLAYERS,
    MODIFIER_MAX_POSITION,
    MODIFIER_MIN_POSITION,
    RACING_COLORS,
    SETTLEMENT_DISPLAY_SECONDS,
)
from engine import (
    claim_outcome_wager,
    claim_round_card,
    current_player,
    legal_modifier_positions,
    place_modifier,
    roll_next,
    settle_due_round,
    start_game,
)
from models import GameState, GameStatus, ModifierKind, OutcomeKind

from ui import (
    render_action_log,
    render_board,
    render_dice_status,
    render_players_table,
    render_round_cards_table,
    render_rules,
    render_settlements,
    render_standings,
)


def render_setup() -> None:
    """Seat players and start a game."""
    st.subheader("New game")
    count = st.number_input("Players", min_value=MIN_PLAYERS, max_value=MAX_PLAYERS, value=MIN_PLAYERS)
    names = [st.text_input(f"Seat {i + 1}", value=f"Player {i + 1}") for i in range(int(count))]
    if st.button("🏁 Start race"):
        seats = [(f"p{i + 1}", name.strip() or f"Player {i + 1}") for i, name in enumerate(names)]
        st.session_state["game"] = start_game(seats, defer_round_settlement=True)
        st.rerun()


def render_turn_controls(game: GameState) -> None:
    """The four actions available to whoever is seated to act."""
    player = current_player(game)
    st.markdown(f"### {player.name} to act")

    col_roll, col_card, col_outcome, col_tile = st.columns(4)

    with col_roll:
        if st.button("🎲 Roll"):
            outcome = roll_next(game, player.id)
            if outcome is not None:
                st.session_state["last_message"] = (
                    f"{player.name} rolled **{outcome.die}**: **{outcome.color}** moves {outcome.steps}"
                )
            st.rerun()

    with col_card:
        color = st.selectbox("Round card", RACING_COLORS, key="card_color")
        if st.button("Take card"):
            if not claim_round_card(game, player.id, color):
                st.warning(f"No round cards left for {color}.")
            else:
                st.rerun()

    with col_outcome:
        color = st.selectbox("Outcome color", RACING_COLORS, key="outcome_color")
        kind = st.radio("Outcome", [k.value for k in OutcomeKind], key="outcome_kind", horizontal=True)
        if st.button("Place wager"):
            if not claim_outcome_wager(game, player.id, color, kind):
                st.warning(f"{player.name} already wagered on {color}.")
            else:
                st.rerun()

    with col_tile:
        legal = legal_modifier_positions(game, player.id)
        position = st.selectbox(
            "Tile cell",
            legal or list(range(MODIFIER_MIN_POSITION, MODIFIER_MAX_POSITION + 1)),
            key="tile_position",
        )
        kind = st.radio("Tile", [k.value for k in ModifierKind], key="tile_kind", horizontal=True)
        if st.button("Place tile"):
            if not place_modifier(game, player.id, position, kind):
                st.warning(f"A tile cannot go on cell {position}.")
            else:
                st.rerun()


def run_app() -> None:
    """Run the main Streamlit application."""
    st.set_page_config(page_title="Camel Race Table", layout="wide")
    st.title("Camel Race Table")

    with st.expander("Game rules", expanded=False):
        render_rules()

    if "game" not in st.session_state:
        render_setup()
        return

    game: GameState = st.session_state["game"]

    if st.button("🔁 New game"):
        del st.session_state["game"]
        st.session_state.pop("last_message", None)
        st.rerun()

    if st.session_state.get("last_message"):
        st.markdown(st.session_state["last_message"])

    board_col, side_col = st.columns([1.6, 1.4])

    with board_col:
        st.subheader("Board")
        render_board(game)
        render_dice_status(game)

    with side_col:
        render_players_table(game)
        render_round_cards_table(game)

    if game.status == GameStatus.ENDED:
        st.success("🎉 The race is over!")
        render_standings(game)
    elif game.settlement_due:
        st.info(f"✅ Round {game.round} complete, settling...")
        time.sleep(SETTLEMENT_DISPLAY_SECONDS)
        settle_due_round(game)
        st.rerun()
    else:
        render_turn_controls(game)

    settle_col, log_col = st.columns(2)
    with settle_col:
        render_settlements(game)
    with log_col:
        log_round = st.selectbox(
            "Log view",
            [None] + list(range(game.round, 0, -1)),
            format_func=lambda r: "Latest" if r is None else f"Round {r}",
        )
        render_action_log(game, log_round)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_app()

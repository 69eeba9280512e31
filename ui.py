"""
UI components and visualization helpers.
"""

from typing import Optional

import pandas as pd
import plotly.express as px
import streamlit as st

from action_log import entries_for_round, recent_entries
from config import (
    ACTION_LOG_ROWS,
    COLOR_MAP,
    DICE,
    DICE_USED_PER_ROUND,
    MODIFIER_COLOR_MAP,
    OUTCOME_PAYOUT_FLOOR,
    OUTCOME_PAYOUTS,
    ROUND_CARD_VALUES,
    TRACK_END,
    TRACK_START,
)
from game_logic import leading_color, rank_racing_pieces
from models import GameState
from settlement import coin_breakdown, final_standings
from wagers import available_round_cards


def render_rules() -> None:
    """Display the rules summary."""
    st.markdown("### Rules")
    st.write("Five racing camels run forward; Black and White run backwards and never rank.")
    st.write(
        f"Each round {DICE_USED_PER_ROUND} of the {len(DICE)} dice are rolled "
        "(Gray moves Black or White). Rolling pays 1 coin."
    )
    st.write(f"Round cards per color: {ROUND_CARD_VALUES}. Leader pays the card, runner-up pays 1, others cost 1.")
    st.write(
        f"Champion / loser wagers pay {OUTCOME_PAYOUTS} by submission order, then "
        f"{OUTCOME_PAYOUT_FLOOR}; each wrong wager costs 1 at the end."
    )
    st.info(
        "Camels carry everything stacked on top of them.\n"
        "- A tile adds +1 (accelerate) or -1 (decelerate) in the camel's own direction and pays its owner 1.\n"
        "- Tiles go on empty cells 2-15, never next to another tile; one tile per player."
    )


def render_board(state: GameState) -> None:
    """Plot the board using Plotly: x-axis is position, stacked markers by height, tiles below."""
    rows = []
    for piece in state.pieces.values():
        rows.append(
            {
                "position": piece.position,
                "height": piece.stack_order,
                "piece": piece.color,
            }
        )
    for modifier in state.modifiers:
        owner = state.player(modifier.owner_id)
        rows.append(
            {
                "position": modifier.position,
                "height": -1,
                "piece": modifier.kind.value,
                "owner": owner.name if owner else modifier.owner_id,
            }
        )

    df = pd.DataFrame(rows)
    fig = px.scatter(
        df,
        x="position",
        y="height",
        color="piece",
        color_discrete_map={**COLOR_MAP, **MODIFIER_COLOR_MAP},
        hover_name="piece",
        hover_data=["owner"] if "owner" in df.columns else None,
    )
    fig.update_traces(marker=dict(size=18, line=dict(width=1, color="black")))
    fig.update_layout(
        xaxis=dict(
            dtick=1,
            range=[TRACK_START - 0.5, TRACK_END + 0.5],
            title="Track position",
        ),
        yaxis=dict(visible=False),
        height=400,
        margin=dict(l=10, r=10, t=30, b=10),
        legend_title_text="Piece / tile",
    )
    st.plotly_chart(fig, use_container_width=True)


def render_dice_status(state: GameState) -> None:
    """Render rolled and unrolled dice for the current round."""
    st.markdown(f"#### Round {state.round} dice ({len(state.used_dice)}/{DICE_USED_PER_ROUND})")
    st.caption(f"Leading: {leading_color(state)}")

    col_rolled, col_left = st.columns(2)

    with col_rolled:
        st.write("**Rolled:**")
        if state.used_dice:
            for die in state.used_dice:
                st.write(f"✓ {die}")
        else:
            st.write("*None yet*")

    with col_left:
        st.write("**In the pyramid:**")
        for die in state.available_dice:
            st.write(f"○ {die}")


def render_players_table(state: GameState) -> None:
    st.markdown("#### Players")
    data = []
    for idx, player in enumerate(state.players):
        data.append(
            {
                "Seat": idx + 1,
                "Player": player.name,
                "Coins": player.coin_balance,
                "Round cards": ", ".join(f"{c.color} {c.value}" for c in player.round_cards),
                "Outcome wagers": len(player.wagered_colors()),
                "To act": "▶" if idx == state.current_player_index else "",
            }
        )
    st.dataframe(pd.DataFrame(data), use_container_width=True, hide_index=True)


def render_round_cards_table(state: GameState) -> None:
    st.markdown("#### Round cards left")
    ranking = rank_racing_pieces(state)
    data = []
    for color in ranking:
        values = [c.value for c in available_round_cards(state, color)]
        data.append(
            {
                "Piece": color,
                "Place": ranking.index(color) + 1,
                "Cell": state.pieces[color].position,
                "Next card": max(values) if values else None,
                "Cards left": len(values),
            }
        )
    st.dataframe(pd.DataFrame(data), use_container_width=True, hide_index=True)


def render_settlements(state: GameState) -> None:
    st.markdown("#### Settlements")
    if not state.settlements:
        st.write("*No settlements yet*")
        return
    for record in reversed(state.settlements):
        title = "Final settlement" if record.is_final else f"Round {record.round}"
        with st.expander(f"{title} ({record.timestamp:%H:%M:%S})", expanded=record.is_final):
            if record.details:
                for line in record.details:
                    st.write(f"- {line}")
            else:
                st.write("*No wagers to settle*")


def render_action_log(state: GameState, round_number: Optional[int] = None) -> None:
    """Latest entries, or every entry of `round_number` when given; newest first."""
    st.markdown("#### Action log")
    if round_number is None:
        entries = recent_entries(state, ACTION_LOG_ROWS)
    else:
        entries = list(reversed(entries_for_round(state, round_number)))
    if not entries:
        st.write("*Nothing yet*")
        return
    names = {p.id: p.name for p in state.players}
    df_log = pd.DataFrame(
        [
            {
                "Round": e.round,
                "Who": names.get(e.player_id, e.player_id),
                "Action": e.action.value,
                "Details": e.description,
            }
            for e in entries
        ]
    )
    st.dataframe(df_log, use_container_width=True, hide_index=True)


def render_standings(state: GameState) -> None:
    """Final ranking plus each player's coin breakdown by source."""
    st.markdown("### Final standings")
    data = []
    for rank, player in enumerate(final_standings(state), start=1):
        row = {"Rank": rank, "Player": player.name, "Coins": player.coin_balance}
        row.update(coin_breakdown(player))
        data.append(row)
    st.dataframe(pd.DataFrame(data).fillna(0), use_container_width=True, hide_index=True)

"""Initial migration: seasons, clubs, teams, players, fixtures, selections, pairings

Revision ID: 001_initial
Revises:
Create Date: 2026-01-10 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "season",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("timezone", sa.String(), nullable=False),
        sa.Column("lock_hour", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "club",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_club_name", "club", ["name"], unique=True)

    op.create_table(
        "seasonrounddate",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("season_id", sa.Integer(), nullable=False),
        sa.Column("division", sa.String(), nullable=False),
        sa.Column("round_number", sa.Integer(), nullable=False),
        sa.Column("planned_date", sa.Date(), nullable=False),
        sa.Column("host_club_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["season_id"], ["season.id"]),
        sa.ForeignKeyConstraint(["host_club_id"], ["club.id"]),
        sa.UniqueConstraint("season_id", "division", "round_number", name="uq_season_division_round"),
    )
    op.create_index("ix_seasonrounddate_season_id", "seasonrounddate", ["season_id"])

    op.create_table(
        "team",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("season_id", sa.Integer(), nullable=False),
        sa.Column("club_id", sa.Integer(), nullable=False),
        sa.Column("division", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["season_id"], ["season.id"]),
        sa.ForeignKeyConstraint(["club_id"], ["club.id"]),
        sa.UniqueConstraint("season_id", "club_id", "division", name="uq_season_club_division"),
    )
    op.create_index("ix_team_season_id", "team", ["season_id"])
    op.create_index("ix_team_club_id", "team", ["club_id"])

    op.create_table(
        "player",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("club_id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("handicap_index", sa.Float(), nullable=False),
        sa.Column("gender", sa.String(), nullable=False),
        sa.Column("is_junior", sa.Boolean(), nullable=False),
        sa.Column("is_validated", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["club_id"], ["club.id"]),
    )
    op.create_index("ix_player_club_id", "player", ["club_id"])

    op.create_table(
        "fixture",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("season_id", sa.Integer(), nullable=False),
        sa.Column("division", sa.String(), nullable=False),
        sa.Column("round_number", sa.Integer(), nullable=False),
        sa.Column("match_date", sa.Date(), nullable=False),
        sa.Column("host_club_id", sa.Integer(), nullable=True),
        sa.Column("team1_id", sa.Integer(), nullable=False),
        sa.Column("team2_id", sa.Integer(), nullable=False),
        sa.Column("team1_points", sa.Float(), nullable=False),
        sa.Column("team2_points", sa.Float(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("match_type", sa.String(), nullable=False),
        sa.Column("selection_override_until", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["season_id"], ["season.id"]),
        sa.ForeignKeyConstraint(["host_club_id"], ["club.id"]),
        sa.ForeignKeyConstraint(["team1_id"], ["team.id"]),
        sa.ForeignKeyConstraint(["team2_id"], ["team.id"]),
        sa.UniqueConstraint(
            "season_id", "division", "round_number", "team1_id", "team2_id", name="uq_fixture_round_teams"
        ),
        sa.CheckConstraint("team1_id <> team2_id", name="ck_fixture_distinct_teams"),
    )
    op.create_index("ix_fixture_season_id", "fixture", ["season_id"])
    op.create_index("ix_fixture_division", "fixture", ["division"])

    op.create_table(
        "selection",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("fixture_id", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("selection_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["fixture_id"], ["fixture.id"]),
        sa.ForeignKeyConstraint(["team_id"], ["team.id"]),
        sa.ForeignKeyConstraint(["player_id"], ["player.id"]),
        sa.UniqueConstraint("fixture_id", "team_id", "player_id", name="uq_selection_player"),
        sa.UniqueConstraint("fixture_id", "team_id", "selection_order", name="uq_selection_order"),
    )
    op.create_index("ix_selection_fixture_id", "selection", ["fixture_id"])
    op.create_index("ix_selection_team_id", "selection", ["team_id"])

    op.create_table(
        "individualmatch",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("fixture_id", sa.Integer(), nullable=False),
        sa.Column("match_order", sa.Integer(), nullable=False),
        sa.Column("team1_player_id", sa.Integer(), nullable=True),
        sa.Column("team1_player2_id", sa.Integer(), nullable=True),
        sa.Column("team2_player_id", sa.Integer(), nullable=True),
        sa.Column("team2_player2_id", sa.Integer(), nullable=True),
        sa.Column("team1_handicap", sa.Float(), nullable=True),
        sa.Column("team2_handicap", sa.Float(), nullable=True),
        sa.Column("strokes_given", sa.Integer(), nullable=False),
        sa.Column("strokes_receiver", sa.Integer(), nullable=True),
        sa.Column("result", sa.String(), nullable=False),
        sa.Column("team1_points", sa.Float(), nullable=False),
        sa.Column("team2_points", sa.Float(), nullable=False),
        sa.Column("forfeit_reason", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["fixture_id"], ["fixture.id"]),
        sa.ForeignKeyConstraint(["team1_player_id"], ["player.id"]),
        sa.ForeignKeyConstraint(["team1_player2_id"], ["player.id"]),
        sa.ForeignKeyConstraint(["team2_player_id"], ["player.id"]),
        sa.ForeignKeyConstraint(["team2_player2_id"], ["player.id"]),
        sa.UniqueConstraint("fixture_id", "match_order", name="uq_individual_match_slot"),
    )
    op.create_index("ix_individualmatch_fixture_id", "individualmatch", ["fixture_id"])

    op.create_table(
        "scratchnotice",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("fixture_id", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("acknowledged_at", sa.DateTime(), nullable=True),
        sa.Column("acknowledged_by", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["fixture_id"], ["fixture.id"]),
        sa.ForeignKeyConstraint(["team_id"], ["team.id"]),
    )
    op.create_index("ix_scratchnotice_fixture_id", "scratchnotice", ["fixture_id"])
    op.create_index("ix_scratchnotice_team_id", "scratchnotice", ["team_id"])


def downgrade() -> None:
    op.drop_table("scratchnotice")
    op.drop_table("individualmatch")
    op.drop_table("selection")
    op.drop_table("fixture")
    op.drop_table("player")
    op.drop_table("team")
    op.drop_table("seasonrounddate")
    op.drop_table("club")
    op.drop_table("season")

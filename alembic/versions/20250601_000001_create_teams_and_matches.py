"""create teams and matches tables

Revision ID: 20250601_000001
Revises:
Create Date: 2025-06-01 12:00:00.000000
"""

import sqlmodel.sql.sqltypes
from alembic import op  # type: ignore[attr-defined]
import sqlalchemy as sa

revision = "20250601_000001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("country", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("logo_url", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_teams_name"), "teams", ["name"], unique=False)

    op.create_table(
        "matches",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("group_id", sa.Uuid(), nullable=False),
        sa.Column("home_team_id", sa.Uuid(), nullable=False),
        sa.Column("away_team_id", sa.Uuid(), nullable=False),
        sa.Column("match_date", sa.Date(), nullable=False),
        sa.Column("match_time", sa.Time(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "upcoming",
                "live",
                "finished",
                name="match_status",
                native_enum=False,
                length=16,
            ),
            nullable=False,
        ),
        sa.Column("home_score", sa.Integer(), nullable=True),
        sa.Column("away_score", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "home_score IS NULL OR home_score >= 0",
            name="ck_matches_home_score_non_negative",
        ),
        sa.CheckConstraint(
            "away_score IS NULL OR away_score >= 0",
            name="ck_matches_away_score_non_negative",
        ),
        sa.ForeignKeyConstraint(["home_team_id"], ["teams.id"]),
        sa.ForeignKeyConstraint(["away_team_id"], ["teams.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_matches_group_id"), "matches", ["group_id"], unique=False)
    op.create_index(
        op.f("ix_matches_home_team_id"), "matches", ["home_team_id"], unique=False
    )
    op.create_index(
        op.f("ix_matches_away_team_id"), "matches", ["away_team_id"], unique=False
    )
    op.create_index(
        op.f("ix_matches_match_date"), "matches", ["match_date"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_matches_match_date"), table_name="matches")
    op.drop_index(op.f("ix_matches_away_team_id"), table_name="matches")
    op.drop_index(op.f("ix_matches_home_team_id"), table_name="matches")
    op.drop_index(op.f("ix_matches_group_id"), table_name="matches")
    op.drop_table("matches")
    op.drop_index(op.f("ix_teams_name"), table_name="teams")
    op.drop_table("teams")

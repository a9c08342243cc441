"""initial schema: groups, songs, song_details

Revision ID: 0001
Revises:
Create Date: 2024-09-01 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
    )

    op.create_table(
        "songs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "group_id",
            sa.Integer(),
            sa.ForeignKey("groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )

    op.create_table(
        "song_details",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "song_id",
            sa.Integer(),
            sa.ForeignKey("songs.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("release_date", sa.Date(), nullable=False, server_default="1970-01-01"),
        sa.Column("text", sa.Text(), nullable=False, server_default="no information"),
        sa.Column("link", sa.String(length=255), nullable=False, server_default="no information"),
    )

    op.create_index("idx_songs_name", "songs", ["name"])
    op.create_index("idx_songs_group_id", "songs", ["group_id"])
    op.create_index("idx_song_details_release_date", "song_details", ["release_date"])


def downgrade() -> None:
    op.drop_index("idx_song_details_release_date", table_name="song_details")
    op.drop_index("idx_songs_group_id", table_name="songs")
    op.drop_index("idx_songs_name", table_name="songs")
    op.drop_table("song_details")
    op.drop_table("songs")
    op.drop_table("groups")

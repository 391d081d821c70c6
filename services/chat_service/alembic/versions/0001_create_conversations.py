from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "conversations",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("pair_key", sa.String(), nullable=False),
        sa.Column("participant_a", sa.String(), nullable=False),
        sa.Column("participant_b", sa.String(), nullable=False),
        sa.Column("display_name_a", sa.String(), nullable=False, server_default=""),
        sa.Column("display_name_b", sa.String(), nullable=False, server_default=""),
        sa.Column("avatar_a", sa.String(), nullable=False, server_default=""),
        sa.Column("avatar_b", sa.String(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_conversations_pair_key", "conversations", ["pair_key"], unique=True)
    op.create_index("ix_conversations_participant_a", "conversations", ["participant_a"], unique=False)
    op.create_index("ix_conversations_participant_b", "conversations", ["participant_b"], unique=False)


def downgrade():
    op.drop_index("ix_conversations_participant_b", table_name="conversations")
    op.drop_index("ix_conversations_participant_a", table_name="conversations")
    op.drop_index("ix_conversations_pair_key", table_name="conversations")
    op.drop_table("conversations")

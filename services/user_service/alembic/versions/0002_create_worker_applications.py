from alembic import op
import sqlalchemy as sa

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "worker_applications",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("certificate_url", sa.String(), nullable=True),
        sa.Column("certificate_file_name", sa.String(), nullable=True),
        sa.Column("license_url", sa.String(), nullable=True),
        sa.Column("license_file_name", sa.String(), nullable=True),
        sa.Column("valid_id_url", sa.String(), nullable=True),
        sa.Column("valid_id_file_name", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_worker_applications_email", "worker_applications", ["email"], unique=False)


def downgrade():
    op.drop_index("ix_worker_applications_email", table_name="worker_applications")
    op.drop_table("worker_applications")

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("category_service", sa.String(), nullable=False),
        sa.Column("specific_service", sa.String(), nullable=False),
        sa.Column("customer_id", sa.String(), nullable=False),
        sa.Column("customer_email", sa.String(), nullable=True),
        sa.Column("customer_name", sa.String(), nullable=False),
        sa.Column("customer_profile_img", sa.String(), nullable=True),
        sa.Column("worker_email", sa.String(), nullable=True),
        sa.Column("region", sa.JSON(), nullable=False),
        sa.Column("province", sa.JSON(), nullable=False),
        sa.Column("city", sa.JSON(), nullable=False),
        sa.Column("barangay", sa.JSON(), nullable=False),
        sa.Column("additional_detail", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("if_done_status", sa.String(), nullable=True),
        sa.Column("service_amount_paid", sa.Float(), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "(if_done_status IS NULL) = (service_amount_paid IS NULL)",
            name="ck_bookings_amount_only_when_done",
        ),
    )
    op.create_index("ix_bookings_customer_id", "bookings", ["customer_id"], unique=False)
    op.create_index("ix_bookings_customer_email", "bookings", ["customer_email"], unique=False)
    op.create_index("ix_bookings_worker_email", "bookings", ["worker_email"], unique=False)
    op.create_index("ix_bookings_status", "bookings", ["status"], unique=False)


def downgrade():
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_worker_email", table_name="bookings")
    op.drop_index("ix_bookings_customer_email", table_name="bookings")
    op.drop_index("ix_bookings_customer_id", table_name="bookings")
    op.drop_table("bookings")

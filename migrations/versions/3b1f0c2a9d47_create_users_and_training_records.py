"""create users and training_records"""

from alembic import op
import sqlalchemy as sa

# Revisiones
revision = "3b1f0c2a9d47"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("confirmed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Cada fila pertenece a un usuario; la app solo expone las del usuario en sesión
    op.create_table(
        "training_records",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("distance", sa.Numeric(), nullable=False),
        sa.Column("duration", sa.String(length=5), nullable=False),
        sa.Column("pace", sa.String(length=16), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("distance > 0", name="ck_training_records_distance_positive"),
    )
    op.create_index(
        "ix_training_records_user_date", "training_records", ["user_id", "date"]
    )


def downgrade():
    op.drop_index("ix_training_records_user_date", table_name="training_records")
    op.drop_table("training_records")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

"""create monitoring tables"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sensor_readings",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "timestamp",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("temperature", sa.Float(), nullable=False),
        sa.Column("ph", sa.Float(), nullable=False),
        sa.Column("tds_level", sa.Float(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        op.f("ix_sensor_readings_timestamp"), "sensor_readings", ["timestamp"], unique=False
    )

    op.create_table(
        "system_status",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("connection_status", sa.String(length=16), nullable=False),
        sa.Column("last_update", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("data_points", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("cpu_usage", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("memory_usage", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("storage_usage", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("uptime", sa.String(length=32), nullable=False, server_default="0d 0h 0m"),
        sa.CheckConstraint(
            "connection_status IN ('connected', 'disconnected', 'error')",
            name="ck_system_status_connection_status",
        ),
    )

    op.create_table(
        "alert_settings",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("temperature_alerts", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("ph_alerts", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("tds_level_alerts", sa.Boolean(), nullable=False, server_default=sa.false()),
    )


def downgrade() -> None:
    op.drop_table("alert_settings")
    op.drop_table("system_status")

    op.drop_index(op.f("ix_sensor_readings_timestamp"), table_name="sensor_readings")
    op.drop_table("sensor_readings")

"""Create escrow records, holdings, events and audit logs.

Revision ID: 0001_create_escrow_tables
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_create_escrow_tables"
down_revision = None
branch_labels = None
depends_on = None

ESCROW_STATUS = ("INITIALIZED", "FUNDED", "RELEASED", "CANCELLED")
ASSET_KIND = ("NATIVE", "TOKEN")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "holdings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("owner", sa.String(length=64), nullable=False),
        sa.Column("asset_key", sa.String(length=64), nullable=False),
        sa.Column("balance", sa.BigInteger(), nullable=False),
        sa.Column("authority", sa.String(length=64), nullable=False),
        sa.Column("program_owned", sa.Boolean(), nullable=False),
        sa.Column("is_frozen", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("owner", "asset_key", "program_owned", name="uq_holdings_owner_asset_custody"),
        sa.CheckConstraint("balance >= 0", name="ck_holding_balance_non_negative"),
    )
    op.create_index("ix_holdings_owner", "holdings", ["owner"], unique=False)

    op.create_table(
        "escrow_records",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("escrow_id", sa.BigInteger(), nullable=False),
        sa.Column("initiator", sa.String(length=64), nullable=False),
        sa.Column("recipient", sa.String(length=64), nullable=False),
        sa.Column("arbiter", sa.String(length=64), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("released_amount", sa.BigInteger(), nullable=False),
        sa.Column("asset_kind", sa.Enum(*ASSET_KIND, name="assetkindcode"), nullable=False),
        sa.Column("token_mint", sa.String(length=64), nullable=True),
        sa.Column("status", sa.Enum(*ESCROW_STATUS, name="escrowstatus"), nullable=False),
        sa.Column("vault_address", sa.String(length=64), nullable=False),
        sa.Column("vault_address_seed", sa.String(length=128), nullable=False),
        sa.UniqueConstraint("vault_address", name="uq_escrow_records_vault_address"),
        sa.CheckConstraint("amount > 0", name="ck_escrow_amount_positive"),
        sa.CheckConstraint("released_amount >= 0", name="ck_escrow_released_non_negative"),
        sa.CheckConstraint("released_amount <= amount", name="ck_escrow_released_within_amount"),
        sa.CheckConstraint(
            "(asset_kind = 'NATIVE' AND token_mint IS NULL) OR (asset_kind = 'TOKEN' AND token_mint IS NOT NULL)",
            name="ck_escrow_token_mint_matches_kind",
        ),
    )
    op.create_index("ix_escrow_records_escrow_id", "escrow_records", ["escrow_id"], unique=True)
    op.create_index("ix_escrow_records_initiator", "escrow_records", ["initiator"], unique=False)
    op.create_index("ix_escrow_records_status", "escrow_records", ["status"], unique=False)

    op.create_table(
        "escrow_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("escrow_record_id", sa.Integer(), sa.ForeignKey("escrow_records.id"), nullable=False),
        sa.Column("kind", sa.String(length=50), nullable=False),
        sa.Column("data_json", sa.JSON(), nullable=False),
        sa.Column("at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_escrow_events_escrow_record_id", "escrow_events", ["escrow_record_id"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("actor", sa.String(length=100), nullable=False),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("data_json", sa.JSON(), nullable=False),
        sa.Column("at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_audit_logs_entity", "audit_logs", ["entity", "entity_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_entity", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_escrow_events_escrow_record_id", table_name="escrow_events")
    op.drop_table("escrow_events")
    op.drop_index("ix_escrow_records_status", table_name="escrow_records")
    op.drop_index("ix_escrow_records_initiator", table_name="escrow_records")
    op.drop_index("ix_escrow_records_escrow_id", table_name="escrow_records")
    op.drop_table("escrow_records")
    op.drop_index("ix_holdings_owner", table_name="holdings")
    op.drop_table("holdings")

    bind = op.get_bind()
    sa.Enum(*ESCROW_STATUS, name="escrowstatus").drop(bind, checkfirst=True)
    sa.Enum(*ASSET_KIND, name="assetkindcode").drop(bind, checkfirst=True)

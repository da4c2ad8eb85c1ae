"""Initial schema — campaigns, contributions, balances, settlements, events, counters.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "campaigns",
        sa.Column("id", sa.Integer, autoincrement=False),
        sa.Column("creator", sa.String(255), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("goal_amount", sa.BigInteger, nullable=False),
        sa.Column("raised_amount", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("deadline", sa.BigInteger, nullable=False),
        sa.Column("withdrawn", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_campaigns"),
    )
    op.create_index("ix_campaigns_creator", "campaigns", ["creator"])

    op.create_table(
        "contributions",
        sa.Column("id", sa.Integer, autoincrement=True),
        sa.Column("campaign_id", sa.Integer, sa.ForeignKey("campaigns.id", name="fk_contributions_campaign_id_campaigns"), nullable=False),
        sa.Column("contributor", sa.String(255), nullable=False),
        sa.Column("amount", sa.BigInteger, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_contributions"),
    )
    op.create_index("ix_contributions_campaign_id", "contributions", ["campaign_id"])

    op.create_table(
        "contributor_balances",
        sa.Column("campaign_id", sa.Integer, sa.ForeignKey("campaigns.id", name="fk_contributor_balances_campaign_id_campaigns"), nullable=False),
        sa.Column("contributor", sa.String(255), nullable=False),
        sa.Column("amount", sa.BigInteger, nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("campaign_id", "contributor", name="pk_contributor_balances"),
    )

    op.create_table(
        "settlements",
        sa.Column("id", sa.Integer, autoincrement=True),
        sa.Column("campaign_id", sa.Integer, sa.ForeignKey("campaigns.id", name="fk_settlements_campaign_id_campaigns"), nullable=False),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("recipient", sa.String(255), nullable=False),
        sa.Column("amount", sa.BigInteger, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("failure_reason", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_settlements"),
    )
    op.create_index("ix_settlements_campaign_id", "settlements", ["campaign_id"])
    op.create_index("ix_settlements_status", "settlements", ["status"])

    op.create_table(
        "ledger_events",
        sa.Column("id", sa.Integer, autoincrement=True),
        sa.Column("campaign_id", sa.Integer, nullable=False),
        sa.Column("event_type", sa.String(40), nullable=False),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_ledger_events"),
    )
    op.create_index("ix_ledger_events_campaign_id", "ledger_events", ["campaign_id"])

    counters = op.create_table(
        "ledger_counters",
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("next_value", sa.Integer, nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("name", name="pk_ledger_counters"),
    )
    op.bulk_insert(counters, [{"name": "campaign_id", "next_value": 0}])


def downgrade() -> None:
    op.drop_table("ledger_counters")
    op.drop_index("ix_ledger_events_campaign_id", table_name="ledger_events")
    op.drop_table("ledger_events")
    op.drop_index("ix_settlements_status", table_name="settlements")
    op.drop_index("ix_settlements_campaign_id", table_name="settlements")
    op.drop_table("settlements")
    op.drop_table("contributor_balances")
    op.drop_index("ix_contributions_campaign_id", table_name="contributions")
    op.drop_table("contributions")
    op.drop_index("ix_campaigns_creator", table_name="campaigns")
    op.drop_table("campaigns")

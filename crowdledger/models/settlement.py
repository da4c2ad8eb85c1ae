"""Settlement ORM — one row per release of escrow (withdrawal or refund).

Invariants:
    - Inserted with status 'pending' in the same transaction that flips
      withdrawn / zeroes the balance
    - status moves pending -> completed | failed once, after the transfer attempt
    - A failed settlement is never retried by the ledger (manual remediation)

Design Decisions:
    - kind/status stored as strings mirroring SettlementKind/SettlementStatus
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crowdledger.core.domain_types import SettlementStatus
from crowdledger.db.base import Base


class Settlement(Base):
    """Escrow release record — the remediation trail for transfers."""
    __tablename__ = "settlements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id"), nullable=False, index=True,
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    recipient: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SettlementStatus.PENDING.value,
        index=True,
    )
    failure_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    campaign: Mapped["Campaign"] = relationship(
        "Campaign", back_populates="settlements",
    )

    @property
    def reference(self) -> str:
        """Idempotency reference handed to the payment rail for this transfer."""
        return f"settlement-{self.id}"

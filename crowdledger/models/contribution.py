"""Contribution ORM — append-only contribution records and per-contributor balances.

Invariants:
    - Contribution: one row per successful contribute call, never merged or updated
    - ContributorBalance: one row per (campaign_id, contributor); amount is the
      running total, zeroed exactly once by a refund

Design Decisions:
    - Composite primary key on ContributorBalance: the (campaign, contributor)
      pair is the identity, no surrogate id
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crowdledger.db.base import Base


class Contribution(Base):
    """One (contributor, amount) entry in a campaign's contribution record."""
    __tablename__ = "contributions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id"), nullable=False, index=True,
    )
    contributor: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    campaign: Mapped["Campaign"] = relationship(
        "Campaign", back_populates="contributions",
    )


class ContributorBalance(Base):
    """Refundable total for one contributor in one campaign."""
    __tablename__ = "contributor_balances"

    campaign_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("campaigns.id"), primary_key=True,
    )
    contributor: Mapped[str] = mapped_column(String(255), primary_key=True)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

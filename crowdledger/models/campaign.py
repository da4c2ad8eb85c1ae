"""Campaign ORM — persists the aggregate root of the funding ledger.

Invariants:
    - id is assigned by the ledger counter (0, 1, 2, ...), never by the database
    - creator, title, description, goal_amount, deadline are immutable after insert
    - raised_amount only grows; withdrawn flips false -> true exactly once
    - Rows are never deleted

Design Decisions:
    - deadline as BigInteger epoch seconds: compared directly with Clock.now()
    - contributions loaded lazily (not selectin): the list is append-only and unbounded
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crowdledger.core.campaign_state import CampaignSnapshot
from crowdledger.db.base import Base


class Campaign(Base):
    """Campaign aggregate root — owns contributions, balances and settlements."""
    __tablename__ = "campaigns"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False,
    )
    creator: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    goal_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    raised_amount: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    deadline: Mapped[int] = mapped_column(BigInteger, nullable=False)
    withdrawn: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    contributions: Mapped[list["Contribution"]] = relationship(
        "Contribution", back_populates="campaign",
        order_by="Contribution.id",
    )
    settlements: Mapped[list["Settlement"]] = relationship(
        "Settlement", back_populates="campaign",
    )

    def to_snapshot(self) -> CampaignSnapshot:
        return CampaignSnapshot(
            id=self.id,
            creator=self.creator,
            title=self.title,
            description=self.description,
            goal_amount=self.goal_amount,
            raised_amount=self.raised_amount,
            deadline=self.deadline,
            withdrawn=self.withdrawn,
            active=self.active,
        )

"""Ledger Counter ORM — named sequential counters owned by the ledger.

Invariants:
    - next_value is read and incremented under the ledger lock, in the same
      transaction as the insert that consumes it
    - The campaign id row is seeded at 0 with the schema (migration 001 and
      db.session.create_schema), so the locking SELECT always finds a row
"""

from sqlalchemy import Insert, Integer, String
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Mapped, mapped_column

from crowdledger.db.base import Base

CAMPAIGN_ID_COUNTER = "campaign_id"


class LedgerCounter(Base):
    __tablename__ = "ledger_counters"

    name: Mapped[str] = mapped_column(String(50), primary_key=True)
    next_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


def seed_counter_statement(dialect_name: str) -> Insert:
    """INSERT the campaign id counter at 0; a no-op when the row already exists.

    PostgreSQL in production, SQLite in tests: both support ON CONFLICT DO NOTHING.
    """
    insert = postgresql.insert if dialect_name == "postgresql" else sqlite.insert
    return (
        insert(LedgerCounter)
        .values(name=CAMPAIGN_ID_COUNTER, next_value=0)
        .on_conflict_do_nothing(index_elements=["name"])
    )

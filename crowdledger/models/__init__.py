"""ORM Models — SQLAlchemy declarative models for all ledger entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Campaign is the aggregate root; every other row is scoped by campaign_id
      except LedgerCounter

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from crowdledger.models.campaign import Campaign  # noqa: F401
from crowdledger.models.contribution import Contribution, ContributorBalance  # noqa: F401
from crowdledger.models.settlement import Settlement  # noqa: F401
from crowdledger.models.ledger_event import LedgerEventRecord  # noqa: F401
from crowdledger.models.ledger_counter import LedgerCounter  # noqa: F401

"""Campaign State — immutable snapshot of one campaign plus its derived phase.

Invariants:
    - withdrawn implies not active
    - Phase is derived from (active, withdrawn, raised, goal, deadline, now), never stored
    - A campaign is open strictly before its deadline; at now == deadline it is closed

Design Decisions:
    - Frozen dataclass: the shell builds one from the ORM row, core rules read it
      without touching the session
"""

from dataclasses import dataclass, asdict

from crowdledger.core.domain_types import CampaignPhase


@dataclass(frozen=True)
class CampaignSnapshot:
    """Read-only view of a campaign — pure, no IO."""

    id: int
    creator: str
    title: str
    description: str
    goal_amount: int
    raised_amount: int
    deadline: int
    withdrawn: bool
    active: bool

    @property
    def goal_reached(self) -> bool:
        return self.raised_amount >= self.goal_amount

    def deadline_passed(self, now: int) -> bool:
        return now >= self.deadline

    def phase(self, now: int) -> CampaignPhase:
        if self.withdrawn:
            return CampaignPhase.SETTLED
        if not self.deadline_passed(now):
            return CampaignPhase.OPEN
        if self.goal_reached:
            return CampaignPhase.SUCCEEDED
        return CampaignPhase.FAILED

    def to_dict(self, now: int) -> dict:
        data = asdict(self)
        data["phase"] = self.phase(now).value
        return data

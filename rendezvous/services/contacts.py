"""
Contact graph operations that touch two users at once.

Both users are passed in explicitly and mutated here; neither entity reaches
into the other's record on its own.
"""

from typing import TYPE_CHECKING

from loguru import logger
from pydantic import BaseModel

from rendezvous.core.constants import FRIENDSHIP, RELATIONSHIP
from rendezvous.core.security import redact_token

if TYPE_CHECKING:
    from rendezvous.user import UserProfile


class BlockResult(BaseModel):
    blocker_id: str
    blocked_id: str
    # contact types removed on each side
    removed_from_blocker: list[str] = []
    removed_from_blocked: list[str] = []


class ReportResult(BaseModel):
    reporter_id: str
    reported_id: str
    counted: bool
    reporter_total: int
    reported_total: int


def _unlink(owner: "UserProfile", peer: "UserProfile") -> list[str]:
    removed = []
    for contact_type in (RELATIONSHIP, FRIENDSHIP):
        if owner.has_contact(peer.id, contact_type):
            removed.append(contact_type)
    owner.remove_user_references(peer)
    return removed


def block(blocker: "UserProfile", blocked: "UserProfile") -> BlockResult:
    """
    Block `blocked` on behalf of `blocker`.

    Records the block, then drops friendship and relationship links in both
    directions. Only the blocker's blocked set changes.
    """
    blocker.data.contacts.blocked[blocked.id] = blocked.id
    result = BlockResult(
        blocker_id=blocker.id,
        blocked_id=blocked.id,
        removed_from_blocker=_unlink(blocker, blocked),
        removed_from_blocked=_unlink(blocked, blocker),
    )
    logger.debug(f"[{redact_token(blocker.id)}] Blocked {redact_token(blocked.id)}")
    return result


def report(reporter: "UserProfile", reported: "UserProfile") -> ReportResult:
    """
    File a report from `reporter` against `reported`.

    Once a reporter has filed REPORT_THRESHOLD reports, further reports are
    still tallied for the reporter but no longer count against the peer.
    """
    counted = not reporter.has_too_many_reports()
    if counted:
        reported.data.reports.reportedby += 1
    else:
        logger.debug(f"[{redact_token(reporter.id)}] Report discarded, reporter exceeded threshold")
    reporter.data.reports.reported += 1
    return ReportResult(
        reporter_id=reporter.id,
        reported_id=reported.id,
        counted=counted,
        reporter_total=reporter.data.reports.reported,
        reported_total=reported.data.reports.reportedby,
    )

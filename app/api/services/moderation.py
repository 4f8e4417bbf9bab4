"""
Location moderation state machine

States: PENDING, APPROVED, REJECTED, HIDDEN.

| From              | Action          | Actor | To                         |
|-------------------|-----------------|-------|----------------------------|
| (none)            | create          | OWNER | PENDING                    |
| any               | admin status-set| ADMIN | APPROVED/REJECTED/HIDDEN   |
| APPROVED          | owner edit      | OWNER | PENDING                    |
| any (owned)       | owner hide      | OWNER | HIDDEN                     |
| any (owned)       | owner unhide    | OWNER | PENDING                    |
| DELETABLE_STATUSES| delete          | ADMIN | (removed)                  |

Admins may move a location to any settable status, so a live location can be
rejected and a hidden one restored. Setting a status a location already has
is a no-op success. Only APPROVED locations are public and reviewable.
"""

from enum import Enum
from typing import Optional

from config.constants import DELETABLE_STATUSES
from app.core.error_handling import ConflictError, ErrorCodes
from app.models import LocationStatus


class ModerationAction(str, Enum):
    """What caused a status change (stored in the audit trail)"""
    CREATE = "CREATE"
    ADMIN_SET_STATUS = "ADMIN_SET_STATUS"
    OWNER_EDIT = "OWNER_EDIT"
    OWNER_HIDE = "OWNER_HIDE"
    OWNER_UNHIDE = "OWNER_UNHIDE"


ADMIN_SETTABLE_STATUSES = (
    LocationStatus.APPROVED,
    LocationStatus.REJECTED,
    LocationStatus.HIDDEN,
)

# the one status guests can see and users can review
PUBLIC_STATUS = LocationStatus.APPROVED

DELETABLE = frozenset(LocationStatus(s) for s in DELETABLE_STATUSES)


def initial_status() -> LocationStatus:
    """New submissions always start PENDING, whatever the client sent"""
    return LocationStatus.PENDING


def admin_target_status(
    current: LocationStatus, target: LocationStatus
) -> Optional[LocationStatus]:
    """New status for an admin status-set, or None when the location already has it"""
    if current == target:
        return None
    return target


def status_after_owner_edit(current: LocationStatus) -> LocationStatus:
    """Content edits send approved locations back to the moderation queue"""
    if current == LocationStatus.APPROVED:
        return LocationStatus.PENDING
    return current


def status_after_owner_hide(current: LocationStatus) -> LocationStatus:
    return LocationStatus.HIDDEN


def status_after_owner_unhide(current: LocationStatus) -> LocationStatus:
    return LocationStatus.PENDING


def is_reviewable(status: LocationStatus) -> bool:
    return status == PUBLIC_STATUS


def ensure_deletable(current: LocationStatus) -> None:
    if current not in DELETABLE:
        allowed = ", ".join(sorted(s.value for s in DELETABLE))
        raise ConflictError(
            f"Location can be deleted only when status is {allowed} (current: {current.value})",
            current_status=current.value,
            error_code=ErrorCodes.CONFLICT_STATE,
        )

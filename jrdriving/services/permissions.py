# jrdriving/services/permissions.py
"""
Role-based capability table.
Each protected operation names a Capability; the table lists the roles allowed to use it.
Ownership rules (e.g. a driver may only move missions assigned to them) live in the services.
"""

import enum
from dataclasses import dataclass

from jrdriving.models.user import Role


class Capability(str, enum.Enum):
    MISSION_CHANGE_STATUS = "mission.change_status"
    MISSION_CREATE = "mission.create"
    MISSION_ASSIGN = "mission.assign"
    MISSION_LIST = "mission.list"
    QUOTE_REVIEW = "quote.review"
    APPLICATION_REVIEW = "application.review"
    DASHBOARD_READ = "dashboard.read"


CAPABILITIES: dict[Capability, frozenset[Role]] = {
    Capability.MISSION_CHANGE_STATUS: frozenset({Role.ADMIN, Role.DRIVER}),
    Capability.MISSION_CREATE: frozenset({Role.ADMIN}),
    Capability.MISSION_ASSIGN: frozenset({Role.ADMIN}),
    Capability.MISSION_LIST: frozenset({Role.ADMIN, Role.DRIVER, Role.CLIENT}),
    Capability.QUOTE_REVIEW: frozenset({Role.ADMIN}),
    Capability.APPLICATION_REVIEW: frozenset({Role.ADMIN}),
    Capability.DASHBOARD_READ: frozenset({Role.ADMIN}),
}

# Roles a visitor may pick at public signup
SIGNUP_ROLES = frozenset({Role.CLIENT, Role.DRIVER})


@dataclass(frozen=True)
class Caller:
    """Identity resolved from the session token for the current request."""
    user_id: int
    profile_id: int
    role: Role
    email: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def is_allowed(role: Role, capability: Capability) -> bool:
    return role in CAPABILITIES.get(capability, frozenset())

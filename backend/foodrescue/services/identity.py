# foodrescue/services/identity.py
from dataclasses import dataclass
from typing import Optional

from foodrescue.core.config import Settings


@dataclass(frozen=True)
class Session:
    """Who is calling, resolved fresh for every request."""

    principal_id: str
    email: str
    is_admin: bool
    donor: Optional[dict] = None

    @property
    def role(self) -> str:
        return "admin" if self.is_admin else "donor"


def role_for_new_user(email: str, settings: Settings) -> str:
    # the allow-list seeds the persisted role at sign-up
    return "admin" if settings.is_admin_email(email) else "donor"


async def resolve_session(repo, user: dict, settings: Settings) -> Session:
    """Map a principal record to a Session. Read-only.

    A missing donor profile is a normal state (onboarding not finished).
    """
    is_admin = user.get("role") == "admin" or settings.is_admin_email(user.get("email"))
    donor = await repo.get_donor(user["id"])
    return Session(principal_id=user["id"], email=user["email"], is_admin=is_admin, donor=donor)

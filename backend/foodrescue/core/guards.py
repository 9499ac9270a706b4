from foodrescue.core.errors import PermissionDenied


def ensure_admin(session):
    if not session.is_admin:
        raise PermissionDenied("Admin access required")


def ensure_owner_or_admin(owner_id, session):
    if not session.is_admin and owner_id != session.principal_id:
        raise PermissionDenied("You do not have access to this request")

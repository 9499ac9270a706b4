from typing import Iterable, Optional

from foodrescue.core.errors import PermissionDenied, TransitionRejected

PICKUP_STATES = ["pending", "confirmed", "completed", "cancelled"]
TERMINAL_STATES = {"completed", "cancelled"}
OPERATIONS = ["confirm", "complete", "cancel"]

TRANSITIONS = {
    ("pending",   "confirm"):  {"to": "confirmed", "roles": ["admin"]},
    ("pending",   "cancel"):   {"to": "cancelled", "roles": ["admin"]},
    ("confirmed", "cancel"):   {"to": "cancelled", "roles": ["admin"]},
    ("confirmed", "complete"): {"to": "completed", "roles": ["admin"]},
}


def can_transition(src: str, operation: str, role: str) -> bool:
    rule = TRANSITIONS.get((src, operation))
    if not rule:
        return False
    return role in rule["roles"]


def transition(src: str, operation: str, role: str) -> str:
    """Return the status `operation` moves `src` to, or raise.

    TransitionRejected when no rule exists for (src, operation);
    PermissionDenied when the rule exists but `role` may not apply it.
    """
    rule = TRANSITIONS.get((src, operation))
    if not rule:
        raise TransitionRejected(src, operation)
    if role not in rule["roles"]:
        raise PermissionDenied(f"Only {', '.join(rule['roles'])} may {operation} requests")
    return rule["to"]


def allowed_operations(src: str, role: Optional[str] = None) -> list[str]:
    ops: Iterable[str] = (op for (s, op) in TRANSITIONS if s == src)
    if role is not None:
        ops = (op for op in ops if can_transition(src, op, role))
    return sorted(ops)

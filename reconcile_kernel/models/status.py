"""
Status sub-resource: conditions and related object references.

Conditions are merged by type: setting a condition replaces the existing
entry of the same type and never appends a duplicate. The transition time
only moves when the condition's status actually changes.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class ConditionStatus(str, Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class StatusReason(str, Enum):
    RECONCILING = "Reconciling"
    FAILING = "Failing"
    INITIALIZING = "Initializing"


CONDITION_AVAILABLE = "Available"


class Condition(BaseModel):
    """One typed, timestamped axis of a resource's health."""

    type: str
    status: ConditionStatus
    reason: Optional[StatusReason] = None
    message: str = ""
    last_transition_time: Optional[datetime] = None
    last_heartbeat_time: Optional[datetime] = None


class ObjectReference(BaseModel):
    """Pointer to an object related to the managed instance."""

    api_version: str
    kind: str
    name: str
    namespace: Optional[str] = None
    uid: str = ""

    def same_object(self, other: "ObjectReference") -> bool:
        return (
            self.api_version == other.api_version
            and self.kind == other.kind
            and self.namespace == other.namespace
            and self.name == other.name
        )


class CommonStatus(BaseModel):
    """Status shared by every managed resource."""

    conditions: List[Condition] = []        # merge key: type
    related_objects: List[ObjectReference] = []


def _now() -> datetime:
    return datetime.now(timezone.utc)


def find_status_condition(
    conditions: List[Condition], condition_type: str
) -> Optional[Condition]:
    """Return the condition with the given type, if present."""
    return next((c for c in conditions if c.type == condition_type), None)


def set_status_condition(conditions: List[Condition], new_condition: Condition) -> None:
    """Upsert ``new_condition`` into ``conditions`` by type."""
    now = _now()
    existing = find_status_condition(conditions, new_condition.type)
    if existing is None:
        conditions.append(
            new_condition.model_copy(
                update={"last_transition_time": now, "last_heartbeat_time": now}
            )
        )
        return

    if existing.status != new_condition.status:
        existing.status = new_condition.status
        existing.last_transition_time = now

    existing.reason = new_condition.reason
    existing.message = new_condition.message
    existing.last_heartbeat_time = now


def remove_status_condition(conditions: List[Condition], condition_type: str) -> None:
    """Remove the condition with the given type, if present."""
    conditions[:] = [c for c in conditions if c.type != condition_type]


def is_status_condition_true(conditions: List[Condition], condition_type: str) -> bool:
    condition = find_status_condition(conditions, condition_type)
    return condition is not None and condition.status == ConditionStatus.TRUE


def set_object_reference(objects: List[ObjectReference], new_ref: ObjectReference) -> None:
    """Upsert ``new_ref`` into ``objects``, keyed by api version, kind, namespace and name."""
    for index, existing in enumerate(objects):
        if existing.same_object(new_ref):
            objects[index] = new_ref
            return
    objects.append(new_ref)


def remove_object_reference(objects: List[ObjectReference], ref: ObjectReference) -> None:
    objects[:] = [o for o in objects if not o.same_object(ref)]

"""
Readiness checks for dependent resources.

Each predicate answers "is this dependent ready?". A dependent that reports
a hard failure raises ResourceFailedError. A resource that has not been
observed yet (``None``) is simply not ready.
"""

from enum import Enum
from typing import Optional

from reconcile_kernel.errors import ResourceFailedError
from reconcile_kernel.models.objects import Deployment, Endpoints, Job, Resource

CONDITION_STATUS_SUCCESS = "True"

DEPLOYMENT_REPLICA_FAILURE = "ReplicaFailure"
DEPLOYMENT_PROGRESSING = "Progressing"


class ReadyMatch(str, Enum):
    """How a ``Ready`` condition proves readiness for a condition-bearing kind."""

    COMPONENTS_READY = "components_ready"   # reason == "ComponentsReady"
    STATUS_TRUE = "status_true"             # status == "True"


def is_deployment_ready(resource: Optional[Deployment]) -> bool:
    if resource is None:
        return False

    for condition in resource.status.conditions:
        if condition.type == DEPLOYMENT_REPLICA_FAILURE:
            raise ResourceFailedError(condition.reason)
        if condition.type == DEPLOYMENT_PROGRESSING and condition.status != CONDITION_STATUS_SUCCESS:
            return False
    return True


def is_endpoints_ready(resource: Optional[Endpoints]) -> bool:
    if resource is None:
        return False
    return any(subset.addresses for subset in resource.subsets)


def is_job_ready(resource: Optional[Job]) -> bool:
    if resource is None:
        return False

    status = resource.status
    if status.failed > 0:
        raise ResourceFailedError(
            f"Job Failed, check log for {resource.namespace or ''}/{resource.name}"
        )
    if status.active > 0 or status.succeeded == 0:
        return False
    return True


def is_conditions_ready(resource: Optional[Resource], match: ReadyMatch) -> bool:
    """
    Generic check for loosely typed resources carrying ``status.conditions``.

    A missing or malformed conditions list is a failure, distinct from a
    list that is present but has no matching ``Ready`` entry.
    """
    if resource is None:
        return False

    not_found = ResourceFailedError(f"Status Conditions for {resource.kind} is not found")
    conditions = resource.status.get("conditions") if isinstance(resource.status, dict) else None
    if not isinstance(conditions, list):
        raise not_found

    for condition in conditions:
        if not isinstance(condition, dict):
            raise not_found
        if condition.get("type") != "Ready":
            continue
        if match == ReadyMatch.COMPONENTS_READY and condition.get("reason") == "ComponentsReady":
            return True
        if match == ReadyMatch.STATUS_TRUE and condition.get("status") == CONDITION_STATUS_SUCCESS:
            return True
    return False


def is_service_mesh_control_plane_ready(resource: Optional[Resource]) -> bool:
    return is_conditions_ready(resource, ReadyMatch.COMPONENTS_READY)


def is_service_mesh_member_roll_ready(resource: Optional[Resource]) -> bool:
    return is_conditions_ready(resource, ReadyMatch.STATUS_TRUE)


def is_service_mesh_member_ready(resource: Optional[Resource]) -> bool:
    return is_conditions_ready(resource, ReadyMatch.STATUS_TRUE)

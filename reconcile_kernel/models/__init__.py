"""Reconcile kernel data models."""

from reconcile_kernel.models.capability import (
    APIResource,
    APIResourceList,
    GroupVersionKind,
)
from reconcile_kernel.models.objects import (
    Deployment,
    DeploymentCondition,
    DeploymentStatus,
    EndpointAddress,
    Endpoints,
    EndpointSubset,
    Job,
    JobStatus,
    ManagedResource,
    ObjectMeta,
    OwnerReference,
    Resource,
    ResourceObject,
)
from reconcile_kernel.models.reconciler import (
    DetectConfig,
    ReconcileResult,
    ReconcilerConfig,
)
from reconcile_kernel.models.status import (
    CommonStatus,
    Condition,
    ConditionStatus,
    ObjectReference,
    StatusReason,
)

__all__ = [
    "APIResource",
    "APIResourceList",
    "CommonStatus",
    "Condition",
    "ConditionStatus",
    "Deployment",
    "DeploymentCondition",
    "DeploymentStatus",
    "DetectConfig",
    "EndpointAddress",
    "EndpointSubset",
    "Endpoints",
    "GroupVersionKind",
    "Job",
    "JobStatus",
    "ManagedResource",
    "ObjectMeta",
    "ObjectReference",
    "OwnerReference",
    "ReconcileResult",
    "ReconcilerConfig",
    "Resource",
    "ResourceObject",
    "StatusReason",
]

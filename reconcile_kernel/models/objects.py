"""
Object model: the managed instance and its dependents.

Dependents come in two flavours: typed kinds whose status the readiness
predicates understand field by field (Deployment, Endpoints, Job), and the
loosely typed ``Resource`` whose status is an arbitrary nested mapping.
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from reconcile_kernel.models.capability import GroupVersionKind
from reconcile_kernel.models.status import CommonStatus, ObjectReference


class OwnerReference(BaseModel):
    """Back-reference from a dependent to the object managing its lifecycle."""

    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool = False
    block_owner_deletion: bool = False


class ObjectMeta(BaseModel):
    name: str
    namespace: Optional[str] = None         # None for cluster-scoped objects
    uid: str = ""                           # Assigned by the object store on create
    labels: Dict[str, str] = {}
    owner_references: List[OwnerReference] = []


class ResourceObject(BaseModel):
    """Common envelope of every stored object."""

    api_version: str
    kind: str
    metadata: ObjectMeta
    namespaced: bool = True

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> Optional[str]:
        return self.metadata.namespace

    def group_version_kind(self) -> GroupVersionKind:
        return GroupVersionKind.from_api_version(self.api_version, self.kind)

    def object_key(self) -> Tuple[str, str, str, str]:
        """Identity of the object inside a store."""
        return (self.api_version, self.kind, self.namespace or "", self.name)

    def reference(self) -> ObjectReference:
        return ObjectReference(
            api_version=self.api_version,
            kind=self.kind,
            name=self.name,
            namespace=self.namespace,
            uid=self.metadata.uid,
        )

    def controller_reference(self) -> Optional[OwnerReference]:
        """The owner reference flagged as controller, if any."""
        return next(
            (ref for ref in self.metadata.owner_references if ref.controller),
            None,
        )


class Resource(ResourceObject):
    """Loosely typed dependent; status is an arbitrary nested mapping."""

    spec: dict = {}
    status: dict = {}


class ManagedResource(ResourceObject):
    """The instance a controller reconciles."""

    spec: dict = {}
    status: CommonStatus = Field(default_factory=CommonStatus)


# --- Typed dependents ---

class DeploymentCondition(BaseModel):
    type: str                               # "Progressing" | "Available" | "ReplicaFailure"
    status: str = "Unknown"
    reason: str = ""
    message: str = ""


class DeploymentStatus(BaseModel):
    replicas: int = 0
    ready_replicas: int = 0
    conditions: List[DeploymentCondition] = []


class Deployment(ResourceObject):
    api_version: str = "apps/v1"
    kind: str = "Deployment"
    spec: dict = {}
    status: DeploymentStatus = Field(default_factory=DeploymentStatus)


class EndpointAddress(BaseModel):
    ip: str
    hostname: Optional[str] = None


class EndpointSubset(BaseModel):
    addresses: List[EndpointAddress] = []
    not_ready_addresses: List[EndpointAddress] = []


class Endpoints(ResourceObject):
    api_version: str = "v1"
    kind: str = "Endpoints"
    subsets: List[EndpointSubset] = []


class JobStatus(BaseModel):
    active: int = 0
    succeeded: int = 0
    failed: int = 0


class Job(ResourceObject):
    api_version: str = "batch/v1"
    kind: str = "Job"
    spec: dict = {}
    status: JobStatus = Field(default_factory=JobStatus)

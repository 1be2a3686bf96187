"""
Object Store: the storage/transport collaborator the kernel writes through.

The kernel only depends on the ``ObjectStore`` protocol. ``InMemoryObjectStore``
is a process-local implementation for embedding and tests; a production host
would back the protocol with its API server client.
"""

import copy
import logging
from typing import Dict, List, Optional, Protocol, Tuple
from uuid import uuid4

from reconcile_kernel.errors import AlreadyExistsError, NotFoundError
from reconcile_kernel.models.objects import ResourceObject

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    """Storage primitives used by the action runner and the reconcile cycle."""

    def get(
        self, api_version: str, kind: str, name: str, namespace: Optional[str] = None
    ) -> ResourceObject:
        ...

    def create(self, obj: ResourceObject) -> None:
        ...

    def update(self, obj: ResourceObject) -> None:
        ...

    def delete(self, obj: ResourceObject) -> None:
        ...

    def update_status(self, obj: ResourceObject) -> None:
        ...


class InMemoryObjectStore:
    """
    Dictionary-backed object store.
    Objects are copied on the way in and on the way out, so callers never
    share mutable state with the store.
    """

    def __init__(self):
        self._objects: Dict[Tuple[str, str, str, str], ResourceObject] = {}

    def get(
        self, api_version: str, kind: str, name: str, namespace: Optional[str] = None
    ) -> ResourceObject:
        key = (api_version, kind, namespace or "", name)
        obj = self._objects.get(key)
        if obj is None:
            raise NotFoundError(f"{kind} {namespace or ''}/{name} not found")
        return obj.model_copy(deep=True)

    def create(self, obj: ResourceObject) -> None:
        key = obj.object_key()
        if key in self._objects:
            raise AlreadyExistsError(f"{obj.kind} {obj.namespace or ''}/{obj.name} already exists")
        if not obj.metadata.uid:
            obj.metadata.uid = uuid4().hex
        self._objects[key] = obj.model_copy(deep=True)
        logger.debug(f"Created {obj.kind} {obj.namespace or ''}/{obj.name}")

    def update(self, obj: ResourceObject) -> None:
        stored = self._require(obj)
        if not obj.metadata.uid:
            obj.metadata.uid = stored.metadata.uid
        self._objects[obj.object_key()] = obj.model_copy(deep=True)
        logger.debug(f"Updated {obj.kind} {obj.namespace or ''}/{obj.name}")

    def delete(self, obj: ResourceObject) -> None:
        self._require(obj)
        del self._objects[obj.object_key()]
        logger.debug(f"Deleted {obj.kind} {obj.namespace or ''}/{obj.name}")

    def update_status(self, obj: ResourceObject) -> None:
        """Persist only the status sub-resource of an existing object."""
        stored = self._require(obj)
        if "status" not in type(obj).model_fields:
            raise NotFoundError(f"{obj.kind} has no status sub-resource")
        status = copy.deepcopy(obj.status)
        self._objects[obj.object_key()] = stored.model_copy(update={"status": status}, deep=True)

    def list(self, api_version: str, kind: str, namespace: Optional[str] = None) -> List[ResourceObject]:
        """All stored objects of one kind, optionally restricted to a namespace."""
        return [
            obj.model_copy(deep=True)
            for (av, k, ns, _), obj in self._objects.items()
            if av == api_version and k == kind and (namespace is None or ns == namespace)
        ]

    def __contains__(self, obj: ResourceObject) -> bool:
        return obj.object_key() in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def _require(self, obj: ResourceObject) -> ResourceObject:
        stored = self._objects.get(obj.object_key())
        if stored is None:
            raise NotFoundError(f"{obj.kind} {obj.namespace or ''}/{obj.name} not found")
        return stored

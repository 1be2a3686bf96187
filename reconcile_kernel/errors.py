"""
Error taxonomy for the reconcile kernel.

ApplyError and ObservationError abort a reconcile pass and surface as a
Failing condition. ResourceNotReadyError is not a hard failure: it surfaces
as an Initializing condition. DiscoveryError never stops the capability
watcher.
"""

from typing import Any


class ReconcileKernelError(Exception):
    """Base class for every error raised by the kernel."""
    pass


class ApplyError(ReconcileKernelError):
    """An action's create/update/delete/owner-reference step failed."""
    pass


class OwnerReferenceError(ApplyError):
    """The owner/dependent relationship is structurally invalid."""
    pass


class AlreadyOwnedError(OwnerReferenceError):
    """The dependent is already controlled by a different owner."""

    def __init__(self, obj: Any, owner_name: str):
        self.object = obj
        self.owner_name = owner_name
        super().__init__(
            f"Object {_display_name(obj)} is already owned by another "
            f"controller {owner_name}"
        )


class ObjectStoreError(ApplyError):
    """Raised by an ObjectStore implementation."""
    pass


class NotFoundError(ObjectStoreError):
    pass


class AlreadyExistsError(ObjectStoreError):
    pass


class ResourceNotReadyError(ReconcileKernelError):
    """A dependent resource has not reached a ready state yet."""

    def __init__(self, partial_object: Any):
        self.partial_object = partial_object
        super().__init__(f"{_display_name(partial_object)} is not ready")


class ResourceFailedError(ReconcileKernelError):
    """A dependent resource reports a hard failure."""
    pass


class ObservationError(ReconcileKernelError):
    """Reading the current state failed."""
    pass


class DiscoveryError(ReconcileKernelError):
    """A capability discovery poll failed."""
    pass


def is_resource_not_ready_error(err: BaseException) -> bool:
    """True when ``err`` only means a dependent is not ready yet."""
    return isinstance(err, ResourceNotReadyError)


def _display_name(obj: Any) -> str:
    namespace = getattr(obj, "namespace", None) or ""
    name = getattr(obj, "name", None) or ""
    return f"{namespace}/{name}"

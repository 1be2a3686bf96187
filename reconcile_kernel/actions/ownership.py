"""Owner references between a managing instance and its dependents."""

from reconcile_kernel.errors import AlreadyOwnedError, OwnerReferenceError
from reconcile_kernel.models.capability import split_api_version
from reconcile_kernel.models.objects import OwnerReference, ResourceObject


def _refers_to_same_owner(a: OwnerReference, b: OwnerReference) -> bool:
    # Versions may differ between references to the same owner.
    return (
        split_api_version(a.api_version)[0] == split_api_version(b.api_version)[0]
        and a.kind == b.kind
        and a.name == b.name
    )


def set_controller_reference(owner: ResourceObject, obj: ResourceObject) -> None:
    """
    Make ``owner`` the controller of ``obj``.

    Raises OwnerReferenceError when a namespaced owner would own a
    cluster-scoped object or an object in another namespace, and
    AlreadyOwnedError when a different controller already owns ``obj``.
    """
    if owner.namespaced:
        if not obj.namespaced:
            raise OwnerReferenceError(
                f"cluster-scoped resource must not have a namespace-scoped owner, "
                f"owner's namespace {owner.namespace}"
            )
        if obj.namespace != owner.namespace:
            raise OwnerReferenceError(
                f"cross-namespace owner references are disallowed, "
                f"owner's namespace {owner.namespace}, obj's namespace {obj.namespace}"
            )

    ref = OwnerReference(
        api_version=owner.api_version,
        kind=owner.kind,
        name=owner.name,
        uid=owner.metadata.uid,
        controller=True,
        block_owner_deletion=True,
    )

    existing = obj.controller_reference()
    if existing is not None and not _refers_to_same_owner(existing, ref):
        raise AlreadyOwnedError(obj, existing.name)

    refs = obj.metadata.owner_references
    for index, current in enumerate(refs):
        if _refers_to_same_owner(current, ref):
            refs[index] = ref
            return
    refs.append(ref)

"""
Readiness Registry: maps a resource kind to its readiness predicate.

Kinds without a dedicated predicate register the generic condition check
with the discriminator that fits them.
"""

from typing import Callable, Dict, Iterable, Optional, Tuple

from reconcile_kernel.models.objects import ResourceObject
from reconcile_kernel.readiness.checks import (
    ReadyMatch,
    is_conditions_ready,
    is_deployment_ready,
    is_endpoints_ready,
    is_job_ready,
)

ReadinessPredicate = Callable[[Optional[ResourceObject]], bool]


class ReadinessRegistry:
    """Dispatches readiness checks by kind."""

    def __init__(self):
        self._predicates: Dict[str, ReadinessPredicate] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self._predicates["Deployment"] = is_deployment_ready
        self._predicates["Endpoints"] = is_endpoints_ready
        self._predicates["Job"] = is_job_ready
        self.register_conditions("ServiceMeshControlPlane", ReadyMatch.COMPONENTS_READY)
        self.register_conditions("ServiceMeshMemberRoll", ReadyMatch.STATUS_TRUE)
        self.register_conditions("ServiceMeshMember", ReadyMatch.STATUS_TRUE)

    def register(self, kind: str, predicate: ReadinessPredicate) -> None:
        """Register (or replace) the predicate for a kind."""
        self._predicates[kind] = predicate

    def register_conditions(self, kind: str, match: ReadyMatch) -> None:
        """Register the generic ``status.conditions`` check for a kind."""
        self._predicates[kind] = lambda resource: is_conditions_ready(resource, match)

    def kinds(self) -> list:
        return sorted(self._predicates)

    def is_ready(self, kind: str, resource: Optional[ResourceObject]) -> bool:
        """Run the predicate registered for ``kind``. Raises KeyError for unknown kinds."""
        predicate = self._predicates.get(kind)
        if predicate is None:
            raise KeyError(f"No readiness check registered for kind '{kind}'")
        return predicate(resource)

    def are_all_ready(self, resources: Iterable[Tuple[str, Optional[ResourceObject]]]) -> bool:
        """True only if every ``(kind, resource)`` pair is ready."""
        for kind, resource in resources:
            if not self.is_ready(kind, resource):
                return False
        return True

    def __contains__(self, kind: str) -> bool:
        return kind in self._predicates

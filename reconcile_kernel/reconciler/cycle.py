"""
Reconcile Cycle: one pass of a controller over a managed instance.

  READ CURRENT STATE → (requeue on failure)
  RUN DESIRED STATE ACTIONS → (requeue on failure)
  CLASSIFY READINESS → SET CONDITION → PERSIST STATUS → SCHEDULE NEXT PASS

Any failure ends the pass with the short error delay. Once every action
applied cleanly the long steady-state delay is used whether or not the
dependents are ready yet; only the persisted condition differs. A failure to
persist status is logged, and on the success path it falls back to the
short delay so the status converges.
"""

import logging
from typing import Callable, Optional, Protocol

from reconcile_kernel.actions.desired_state import DesiredResourceState
from reconcile_kernel.actions.runner import ActionRunner
from reconcile_kernel.errors import (
    ObservationError,
    ReconcileKernelError,
    is_resource_not_ready_error,
)
from reconcile_kernel.models.objects import ManagedResource, ResourceObject
from reconcile_kernel.models.reconciler import ReconcileResult, ReconcilerConfig
from reconcile_kernel.models.status import (
    Condition,
    ConditionStatus,
    StatusReason,
    set_object_reference,
    set_status_condition,
)
from reconcile_kernel.object_store.store import ObjectStore

logger = logging.getLogger(__name__)

MESSAGE_ALL_READY = "All resources are ready"
MESSAGE_NOT_READY = "One or more resources are not ready"


class Observer(Protocol):
    def read(self, instance: ManagedResource) -> None:
        """Populate the caller's view of current state, raising on failure."""
        ...


class ReadinessProbe(Protocol):
    def is_resources_ready(self, instance: ManagedResource) -> bool:
        ...


class ResourceState(Observer, ReadinessProbe, Protocol):
    """Per resource type: how to observe dependents and judge their readiness."""
    pass


DesiredStateFn = Callable[[ManagedResource], DesiredResourceState]


class ReconcileCycle:
    """
    Drives one managed instance toward its desired state.

    The host must not run two passes for the same instance concurrently.
    """

    def __init__(self, store: ObjectStore, config: Optional[ReconcilerConfig] = None):
        self.store = store
        self.config = config or ReconcilerConfig()

    def reconcile(
        self,
        instance: ManagedResource,
        current_state: ResourceState,
        desired_state_fn: DesiredStateFn,
    ) -> ReconcileResult:
        """Run a full pass: read, compute desired state, apply, classify."""
        result = self.read_current_state(instance, current_state)
        if result.requeue:
            return result

        desired_state = desired_state_fn(instance)
        return self.run_desired_state_actions(instance, current_state, desired_state)

    def read_current_state(
        self, instance: ManagedResource, observer: Observer
    ) -> ReconcileResult:
        """Phase 1. A result with ``requeue`` set means the pass must stop."""
        try:
            observer.read(instance)
        except ReconcileKernelError as e:
            return self.manage_error(instance, e)
        except Exception as e:
            return self.manage_error(instance, ObservationError(str(e)))
        return ReconcileResult()

    def run_desired_state_actions(
        self,
        instance: ManagedResource,
        probe: ReadinessProbe,
        desired_state: DesiredResourceState,
    ) -> ReconcileResult:
        """Phase 2. Apply every action, then classify readiness."""
        runner = ActionRunner(self.store, instance)
        try:
            runner.run_all(desired_state)
        except Exception as e:
            return self.manage_error(instance, e)

        try:
            resources_ready = probe.is_resources_ready(instance)
        except Exception as e:
            return self.manage_error(instance, e)

        return self.manage_success(instance, resources_ready)

    def manage_error(self, instance: ManagedResource, issue: Exception) -> ReconcileResult:
        """Record ``issue`` on the instance and ask for a fast retry."""
        if is_resource_not_ready_error(issue):
            reason = StatusReason.INITIALIZING
        else:
            reason = StatusReason.FAILING
            logger.error(f"Reconcile of {instance.kind} {_display(instance)} failed: {issue}")

        self._set_condition(instance, ConditionStatus.FALSE, reason, str(issue))
        # A failed status write does not change the result.
        self._persist_status(instance)

        return self._error_result()

    def manage_success(self, instance: ManagedResource, resources_ready: bool) -> ReconcileResult:
        """Record readiness and schedule the steady-state pass."""
        if resources_ready:
            self._set_condition(
                instance, ConditionStatus.TRUE, StatusReason.RECONCILING, MESSAGE_ALL_READY
            )
        else:
            self._set_condition(
                instance, ConditionStatus.FALSE, StatusReason.INITIALIZING, MESSAGE_NOT_READY
            )

        if not self._persist_status(instance):
            return self._error_result()

        return ReconcileResult(requeue_after=self.config.requeue_delay)

    def update_related_objects(self, instance: ManagedResource, resource: ResourceObject) -> None:
        """Track ``resource`` in the instance's related objects (persisted with status)."""
        set_object_reference(instance.status.related_objects, resource.reference())

    def _set_condition(
        self,
        instance: ManagedResource,
        status: ConditionStatus,
        reason: StatusReason,
        message: str,
    ) -> None:
        set_status_condition(
            instance.status.conditions,
            Condition(
                type=self.config.condition_type,
                status=status,
                reason=reason,
                message=message,
            ),
        )

    def _persist_status(self, instance: ManagedResource) -> bool:
        try:
            self.store.update_status(instance)
        except Exception as e:
            logger.error(f"Unable to update status of {instance.kind} {_display(instance)}: {e}")
            return False
        return True

    def _error_result(self) -> ReconcileResult:
        return ReconcileResult(
            requeue_after=self.config.requeue_delay_error,
            requeue=True,
        )


def _display(obj: ResourceObject) -> str:
    return f"{obj.namespace or ''}/{obj.name}"

"""
Action Runner: applies a desired state against an object store.

Behavioral Contract:
- Actions run strictly in listed order, one at a time
- The first failing action stops the run; its exception propagates unmodified
- Actions after a failure are never attempted, and nothing is rolled back
- Every attempt is logged and recorded with its index, outcome and message
"""

import logging
from enum import Enum
from typing import List

from pydantic import BaseModel

from reconcile_kernel.actions.desired_state import DesiredResourceState
from reconcile_kernel.actions.ownership import set_controller_reference
from reconcile_kernel.models.objects import ResourceObject
from reconcile_kernel.object_store.store import ObjectStore

logger = logging.getLogger(__name__)


class ActionOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class ActionRecord(BaseModel):
    """One attempted action."""

    index: int
    outcome: ActionOutcome
    message: str


class ActionRunner:
    """Runs actions on behalf of ``owner``, the instance being reconciled."""

    def __init__(self, store: ObjectStore, owner: ResourceObject):
        self.store = store
        self.owner = owner
        self.records: List[ActionRecord] = []

    def run_all(self, desired_state: DesiredResourceState) -> None:
        """Apply every action in order, stopping at the first failure."""
        for index, action in enumerate(desired_state):
            try:
                message = action.run(self)
            except Exception:
                self._record(index, ActionOutcome.FAILED, action.message)
                raise
            self._record(index, ActionOutcome.SUCCESS, message)

    def create(self, obj: ResourceObject, skip_owner_ref: bool = False) -> None:
        if not skip_owner_ref:
            self._set_owner(obj)
        try:
            self.store.create(obj)
        except Exception as e:
            logger.error(f"Error creating object {obj.kind} {obj.namespace or ''}/{obj.name}: {e}")
            raise

    def update(self, obj: ResourceObject, skip_owner_ref: bool = False) -> None:
        if not skip_owner_ref:
            self._set_owner(obj)
        try:
            self.store.update(obj)
        except Exception as e:
            logger.error(f"Error updating object {obj.kind} {obj.namespace or ''}/{obj.name}: {e}")
            raise

    def delete(self, obj: ResourceObject) -> None:
        try:
            self.store.delete(obj)
        except Exception as e:
            logger.error(f"Error deleting object {obj.kind} {obj.namespace or ''}/{obj.name}: {e}")
            raise

    def error(self, err: Exception) -> None:
        raise err

    def _set_owner(self, obj: ResourceObject) -> None:
        try:
            set_controller_reference(self.owner, obj)
        except Exception as e:
            logger.error(f"Error setting controller reference: {e}")
            raise

    def _record(self, index: int, outcome: ActionOutcome, message: str) -> None:
        self.records.append(ActionRecord(index=index, outcome=outcome, message=message))
        logger.info("(%5d) %10s %s", index, outcome.value, message)

"""Reconciler configuration, pass results and capability detection config."""

from datetime import timedelta
from typing import List, Optional

from pydantic import BaseModel

from reconcile_kernel.models.capability import GroupVersionKind
from reconcile_kernel.models.status import CONDITION_AVAILABLE

REQUEUE_DELAY = timedelta(minutes=60)
REQUEUE_DELAY_ERROR = timedelta(seconds=5)
DEFAULT_AUTO_DETECT_TICK = timedelta(minutes=2)


class ReconcilerConfig(BaseModel):
    """Configuration for the reconcile cycle."""

    requeue_delay: timedelta = REQUEUE_DELAY              # steady state
    requeue_delay_error: timedelta = REQUEUE_DELAY_ERROR  # after any failure
    condition_type: str = CONDITION_AVAILABLE


class ReconcileResult(BaseModel):
    """What the host scheduler should do after a pass."""

    requeue_after: timedelta = timedelta(0)
    requeue: bool = False


class DetectConfig(BaseModel):
    """Configuration for the background capability watcher."""

    group_version_kinds: List[GroupVersionKind] = []
    delay: Optional[timedelta] = None       # None means DEFAULT_AUTO_DETECT_TICK
    exit_on_change: bool = False

    @property
    def interval(self) -> timedelta:
        return self.delay if self.delay is not None else DEFAULT_AUTO_DETECT_TICK

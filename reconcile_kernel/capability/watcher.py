"""
Capability Watcher: periodically detects which resource kinds exist.

Each tick lists the discovery catalog, records per watched kind whether it
is served, and reports kinds that appeared or disappeared since the last
tick. With ``exit_on_change`` the process exits with status 1 on any
change, leaving the restart (and a fresh detection) to the supervisor.

The first tick compares against an all-false previous state, so kinds that
are already present count as newly deployed. Hosts that enable
``exit_on_change`` call ``detect_capabilities()`` once before ``start()``.
"""

import asyncio
import logging
import os
import threading
from typing import Callable, Dict, List, Optional, Protocol

from reconcile_kernel.capability.state import SharedStateStore, get_state_store
from reconcile_kernel.errors import DiscoveryError
from reconcile_kernel.models.capability import APIResourceList, GroupVersionKind
from reconcile_kernel.models.reconciler import DetectConfig

logger = logging.getLogger(__name__)


class DiscoveryService(Protocol):
    """Lists every resource kind currently served, grouped by group/version."""

    def server_resources(self) -> List[APIResourceList]:
        ...


class CapabilityWatcher:
    """Background auto-detection of capabilities."""

    def __init__(
        self,
        discovery: DiscoveryService,
        config: DetectConfig,
        state: Optional[SharedStateStore] = None,
        exit_process: Callable[[int], None] = os._exit,
    ):
        self.discovery = discovery
        self.config = config
        self.state = state if state is not None else get_state_store()
        self._exit_process = exit_process
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def interval_seconds(self) -> float:
        return self.config.interval.total_seconds()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """
        Run one tick now, then one per interval until ``stop()``. A no-op while
        a previous loop is still running, including one still draining a stop.
        """
        if self.running:
            return
        # Each thread owns its stop event.
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._watch_loop,
            args=(self._stop_event,),
            name="capability-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """
        Stop ticking. An in-flight discovery query runs to completion; if it
        outlives ``timeout`` the watcher stays ``running`` until it finishes.
        """
        if self._stop_event is not None:
            self._stop_event.set()
        if self._thread is None:
            return
        self._thread.join(timeout=timeout)
        if not self._thread.is_alive():
            self._thread = None

    def _watch_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            self._tick()
            stop_event.wait(self.interval_seconds)

    def _tick(self) -> None:
        try:
            self.auto_detect_capabilities()
        except Exception:
            logger.exception("Capability detection tick failed")

    async def run_async(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """Run the same loop inside an asyncio host."""
        if stop_event is None:
            stop_event = asyncio.Event()

        while not stop_event.is_set():
            await asyncio.to_thread(self._tick)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue

    def auto_detect_capabilities(self) -> None:
        """One tick: detect, then report every transition."""
        previous: Dict[str, bool] = {
            gvk.key: self.is_resource_available(gvk)
            for gvk in self.config.group_version_kinds
        }

        self.detect_capabilities()

        for gvk in self.config.group_version_kinds:
            before = previous[gvk.key]
            after = self.is_resource_available(gvk)

            if not before and after:
                if self.config.exit_on_change:
                    logger.info(f"{gvk} is deployed in cluster. Restarting to enable all APIs ....")
                    self._exit_process(1)
                else:
                    logger.info(f"{gvk} is deployed in cluster")
            elif before and not after:
                if self.config.exit_on_change:
                    logger.info(f"{gvk} is undeployed. Restarting to disable some APIs ....")
                    self._exit_process(1)
                else:
                    logger.info(f"{gvk} is undeployed in cluster")
            elif not after:
                logger.debug(f"{gvk} is not deployed in cluster")

    def detect_capabilities(self) -> bool:
        """
        Query discovery and store availability for every watched kind.
        Returns False, leaving the state untouched, if discovery fails.
        """
        try:
            api_lists = self._query_discovery()
        except DiscoveryError:
            logger.exception("Failed to get API list")
            return False

        for gvk in self.config.group_version_kinds:
            exists = any(
                api_list.group_version == gvk.group_version and api_list.has_kind(gvk.kind)
                for api_list in api_lists
            )
            self.state.set_state(gvk.key, exists)
        return True

    def is_resource_available(self, gvk: GroupVersionKind) -> bool:
        return self.state.get_state(gvk.key)

    def _query_discovery(self) -> List[APIResourceList]:
        try:
            return self.discovery.server_resources()
        except DiscoveryError:
            raise
        except Exception as e:
            raise DiscoveryError(f"Discovery query failed: {e}") from e

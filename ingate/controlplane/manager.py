"""Controller manager: health checks, event dispatch and the run loop."""

from __future__ import annotations

import logging
import signal
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from ingate.controlplane.objects import (
    INGATE_CONTROLLER_NAME,
    MemoryClient,
    Request,
    Result,
)

logger = logging.getLogger(__name__)

Check = Callable[[], None]


def ping() -> None:
    """A health check that always passes."""
    return None


@dataclass
class Watch:
    """A secondary kind whose events map to requests for the primary kind."""

    kind: type
    map_func: Callable[[object], list[Request]]
    predicate: Callable[[object], bool] = lambda obj: True


@dataclass
class Controller:
    """A reconciler bound to the kind it owns and the kinds it watches."""

    name: str
    reconciler: object
    for_kind: type
    predicate: Callable[[object], bool] = lambda obj: True
    watches: list[Watch] = field(default_factory=list)


class Manager:
    """Runs controllers against a client and serves health checks."""

    def __init__(
        self,
        client: MemoryClient,
        health_probe_bind_address: str = ":9000",
        metrics_bind_address: str = ":8080",
        leader_election: bool = False,
        leader_election_id: str = INGATE_CONTROLLER_NAME,
        requeue_interval: float = 0.1,
    ) -> None:
        self.client = client
        self.health_probe_bind_address = health_probe_bind_address
        self.metrics_bind_address = metrics_bind_address
        self.leader_election = leader_election
        self.leader_election_id = leader_election_id
        self.requeue_interval = requeue_interval
        self.controllers: list[Controller] = []
        self._healthz: dict[str, Check] = {}
        self._readyz: dict[str, Check] = {}
        self._pending: list[tuple[Controller, Request]] = []

    @staticmethod
    def _add_check(checks: dict[str, Check], name: str, check: Check) -> None:
        if name in checks:
            raise ValueError(f"check {name!r} already added")
        checks[name] = check

    def add_healthz_check(self, name: str, check: Check) -> None:
        """Add a liveness check; raise ValueError if the name is taken."""
        self._add_check(self._healthz, name, check)

    def add_readyz_check(self, name: str, check: Check) -> None:
        """Add a readiness check; raise ValueError if the name is taken."""
        self._add_check(self._readyz, name, check)

    @staticmethod
    def _run_checks(checks: dict[str, Check]) -> dict[str, Optional[str]]:
        outcome: dict[str, Optional[str]] = {}
        for name, check in checks.items():
            try:
                check()
                outcome[name] = None
            except Exception as err:  # a failing check reports, never crashes
                outcome[name] = str(err)
        return outcome

    def healthz(self) -> dict[str, Optional[str]]:
        """Run liveness checks; map each name to its error or None."""
        return self._run_checks(self._healthz)

    def readyz(self) -> dict[str, Optional[str]]:
        """Run readiness checks; map each name to its error or None."""
        return self._run_checks(self._readyz)

    def add_controller(self, controller: Controller) -> None:
        """Register a controller."""
        self.controllers.append(controller)

    def _process(self, controller: Controller, request: Request) -> Result:
        try:
            result = controller.reconciler.reconcile(request)
        except Exception as err:
            logger.error("reconcile of %s by %s failed: %s", request, controller.name, err)
            result = Result(requeue=True)
        if result.requeue:
            self._pending.append((controller, request))
        return result

    def _requests_for(self, controller: Controller, obj: object) -> list[Request]:
        requests = []
        if isinstance(obj, controller.for_kind) and controller.predicate(obj):
            requests.append(Request(obj.key))
        for watch in controller.watches:
            if isinstance(obj, watch.kind) and watch.predicate(obj):
                requests.extend(watch.map_func(obj))
        return requests

    def dispatch(self, obj: object) -> list[tuple[Request, Result]]:
        """Reconcile every request that an event on ``obj`` leads to."""
        outcomes = []
        for controller in self.controllers:
            for request in self._requests_for(controller, obj):
                outcomes.append((request, self._process(controller, request)))
        return outcomes

    def _retry_pending(self) -> None:
        pending, self._pending = self._pending, []
        for controller, request in pending:
            self._process(controller, request)

    def start(self, stop_event: threading.Event) -> None:
        """Reconcile all stored objects, then retry requeued work until stopped."""
        logger.info("Starting InGate Manager")
        for controller in self.controllers:
            for obj in self.client.list(controller.for_kind):
                if controller.predicate(obj):
                    self._process(controller, Request(obj.key))
        while not stop_event.wait(self.requeue_interval):
            self._retry_pending()


def _signal_event() -> threading.Event:
    event = threading.Event()

    def handler(signum, frame) -> None:
        event.set()

    signal.signal(signal.SIGINT, handler)
    signal.signal(signal.SIGTERM, handler)
    return event


def start(client: MemoryClient, stop_event: Optional[threading.Event] = None) -> Manager:
    """Build the manager with all controllers and run it until stopped."""
    from ingate.controlplane.gateway import GatewayReconciler
    from ingate.controlplane.gatewayclass import GatewayClassReconciler

    if stop_event is None:
        stop_event = _signal_event()
    manager = Manager(client)
    manager.add_healthz_check("healthz", ping)
    manager.add_readyz_check("readyz", ping)

    logger.info("adding gateway class controller")
    GatewayClassReconciler(client).setup_with_manager(manager)
    logger.info("adding gateway controller")
    GatewayReconciler(client).setup_with_manager(manager)

    manager.start(stop_event)
    return manager
"""Reconciler that accepts Gateways whose class belongs to this controller."""

from __future__ import annotations

import logging
import random
import time
from typing import TYPE_CHECKING

from ingate.controlplane.objects import (
    ACCEPTED,
    CONDITION_TRUE,
    INGATE_CONTROLLER_NAME,
    ApiError,
    Condition,
    ConflictError,
    Gateway,
    GatewayClass,
    MemoryClient,
    NamespacedName,
    NotFoundError,
    Request,
    Result,
)
from ingate.controlplane.predicates import (
    match_gateway_class_controller_name,
    match_gateway_controller_name,
)

if TYPE_CHECKING:
    from ingate.controlplane.manager import Manager

logger = logging.getLogger(__name__)

_RETRY_STEPS = 5
_RETRY_DELAY = 0.01
_RETRY_JITTER = 0.1


def _retry_on_conflict(action) -> None:
    """Run ``action`` until it stops raising ConflictError, a bounded number of times."""
    for attempt in range(_RETRY_STEPS):
        try:
            action()
            return
        except ConflictError:
            if attempt == _RETRY_STEPS - 1:
                raise
        time.sleep(_RETRY_DELAY * (1 + random.uniform(0, _RETRY_JITTER)))


class GatewayReconciler:
    """Marks Gateways of this controller's classes as accepted."""

    def __init__(self, client: MemoryClient) -> None:
        self.client = client

    def setup_with_manager(self, manager: Manager) -> None:
        """Register a controller for Gateways, also watching GatewayClasses."""
        from ingate.controlplane.manager import Controller, Watch

        logger.info("setting up gateway controller")
        manager.add_controller(
            Controller(
                name="gateway",
                reconciler=self,
                for_kind=Gateway,
                predicate=match_gateway_controller_name(
                    self.client, INGATE_CONTROLLER_NAME
                ),
                watches=[
                    Watch(
                        kind=GatewayClass,
                        map_func=self.gateway_class_requests,
                        predicate=match_gateway_class_controller_name(
                            INGATE_CONTROLLER_NAME
                        ),
                    )
                ],
            )
        )

    def gateway_class_requests(self, gateway_class: GatewayClass) -> list[Request]:
        """Return requests for every Gateway that uses ``gateway_class``."""
        try:
            gateways = self.client.list(Gateway)
        except ApiError as err:
            logger.error("Unable to list Gateways %s", err)
            return []
        requests = []
        for gw in gateways:
            if gw.gateway_class_name != gateway_class.name:
                logger.debug(
                    "skipping gateway %s does not match class %s",
                    gw.name,
                    gw.gateway_class_name,
                )
                continue
            requests.append(Request(gw.key))
            logger.info(
                "Queueing gateway requests in namespace %s for gateway %s",
                gw.namespace,
                gw.name,
            )
        return requests

    def reconcile(self, request: Request) -> Result:
        """Accept the requested Gateway if its class belongs to this controller."""
        logger.info("starting reconcile of gateway %s", request)
        try:
            gw = self.client.get(Gateway, request.namespaced_name)
        except NotFoundError:
            logger.info("gateway not found %s", request)
            return Result()

        logger.info("reconciling gateway %s", gw.name)
        try:
            gwc = self.client.get(
                GatewayClass, NamespacedName(name=gw.gateway_class_name)
            )
        except ApiError:
            logger.info("GatewayClassName does not match %s", request)
            return Result()

        if gwc.controller_name != INGATE_CONTROLLER_NAME:
            logger.info(
                "Nothing to do, GatewayClass %s does not have matching controller name %s",
                gwc.controller_name,
                INGATE_CONTROLLER_NAME,
            )
            return Result()

        gw.conditions = [
            Condition(
                type=ACCEPTED,
                status=CONDITION_TRUE,
                reason=ACCEPTED,
                message="Gateway has been accepted by the InGate Controller.",
                observed_generation=gw.generation,
            )
        ]
        logger.info("accepted gateway %s", gw.name)
        try:
            self.client.update_status(gw)
        except NotFoundError:
            logger.info("gateway %s not found", gw.name)
            raise
        except ConflictError:
            logger.info("gateway %s conflict, requeuing", gw.name)

            def retry() -> None:
                fresh = self.client.get(Gateway, request.namespaced_name)
                self.client.update_status(fresh)

            try:
                _retry_on_conflict(retry)
            except ApiError:
                logger.warning("failed to update gateway on retry %s", gw.name)
                raise
            raise
        return Result()
"""Reconciler that accepts GatewayClasses handled by this controller."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ingate.controlplane.objects import (
    ACCEPTED,
    CONDITION_TRUE,
    INGATE_CONTROLLER_NAME,
    Condition,
    ConflictError,
    GatewayClass,
    MemoryClient,
    NotFoundError,
    Request,
    Result,
)
from ingate.controlplane.predicates import match_gateway_class_controller_name

if TYPE_CHECKING:
    from ingate.controlplane.manager import Manager

logger = logging.getLogger(__name__)


class GatewayClassReconciler:
    """Marks matching GatewayClasses as accepted."""

    def __init__(self, client: MemoryClient) -> None:
        self.client = client

    def setup_with_manager(self, manager: Manager) -> None:
        """Register a controller for GatewayClasses with ``manager``."""
        from ingate.controlplane.manager import Controller

        logger.info("setting up gateway class controller")
        manager.add_controller(
            Controller(
                name="gatewayclass",
                reconciler=self,
                for_kind=GatewayClass,
                predicate=match_gateway_class_controller_name(INGATE_CONTROLLER_NAME),
            )
        )

    def reconcile(self, request: Request) -> Result:
        """Accept the requested GatewayClass if it belongs to this controller.

        Errors from the status update are raised; a missing class is ignored.
        """
        logger.info("starting reconcile gateway class")
        try:
            gwc = self.client.get(GatewayClass, request.namespaced_name)
        except NotFoundError:
            return Result()

        logger.info("reconciling gateway class %s", gwc.name)
        if gwc.controller_name != INGATE_CONTROLLER_NAME:
            logger.info(
                "gateway class does not match controller %s/%s",
                gwc.namespace,
                gwc.name,
            )
            return Result()

        if gwc.metadata.deletion_timestamp is not None:
            logger.info("gateway class is being deleted %s/%s", gwc.namespace, gwc.name)
            return Result()

        gwc.conditions = [
            Condition(
                type=ACCEPTED,
                status=CONDITION_TRUE,
                reason=ACCEPTED,
                message="Gateway Class has been accepted by the InGate Controller.",
                observed_generation=gwc.generation,
            )
        ]
        logger.info("accepted gateway class %s", gwc.name)
        try:
            self.client.update_status(gwc)
        except NotFoundError:
            logger.info("gateway class %s not found", gwc.name)
            raise
        except ConflictError:
            logger.info("gateway class %s conflicts, requeuing", gwc.name)
            raise
        return Result()
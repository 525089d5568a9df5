"""Filters that select the objects this controller is responsible for."""

from __future__ import annotations

import logging
from typing import Callable

from ingate.controlplane.objects import (
    ApiError,
    Gateway,
    GatewayClass,
    MemoryClient,
    NamespacedName,
)

logger = logging.getLogger(__name__)


def match_gateway_controller_name(
    client: MemoryClient, controller_name: str
) -> Callable[[object], bool]:
    """Select gateways whose GatewayClass is handled by ``controller_name``."""

    def matches(obj: object) -> bool:
        if not isinstance(obj, Gateway):
            return False
        try:
            gwc = client.get(GatewayClass, NamespacedName(name=obj.gateway_class_name))
        except ApiError as err:
            logger.error("Unable to get GatewayClass %s", err)
            return False
        return gwc.controller_name == controller_name

    return matches


def match_gateway_class_controller_name(
    controller_name: str,
) -> Callable[[object], bool]:
    """Select gateway classes handled by ``controller_name``."""

    def matches(obj: object) -> bool:
        if not isinstance(obj, GatewayClass):
            return False
        return obj.controller_name == controller_name

    return matches
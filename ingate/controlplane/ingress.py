"""IngressClass handling settings."""

from __future__ import annotations

from dataclasses import dataclass

# Annotation that picks a specific "class" for an Ingress. Ingresses with it
# unset, set to the configured value or to the empty string are processed.
INGRESS_KEY = "kubernetes.io/ingress.class"

# Default controller name.
DEFAULT_CONTROLLER_NAME = "k8s.io/ingate"

# Default value of the ingress class annotation.
DEFAULT_ANNOTATION_VALUE = "ingate"


@dataclass(frozen=True)
class Configuration:
    """How IngressClass objects are matched and how the controller behaves.

    controller: controller value the daemon watches for.
    annotation_value: annotation value watched when no ingress class name is
        found but the (deprecated) annotation is.
    watch_without_class: also watch Ingresses without an IngressClass.
    ignore_ingress_class: ignore IngressClass objects when no permissions on
        them are granted.
    ingress_class_by_name: match IngressClasses by metadata name together
        with the controller value.
    """

    controller: str = DEFAULT_CONTROLLER_NAME
    annotation_value: str = DEFAULT_ANNOTATION_VALUE
    watch_without_class: bool = False
    ignore_ingress_class: bool = False
    ingress_class_by_name: bool = False
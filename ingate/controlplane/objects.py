"""Gateway API objects, reconcile requests and an in-memory object store."""

from __future__ import annotations

import copy
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, TypeVar, Union

INGATE_CONTROLLER_NAME = "k8s.io/ingate"

CONDITION_TRUE = "True"
CONDITION_FALSE = "False"
CONDITION_UNKNOWN = "Unknown"

ACCEPTED = "Accepted"


@dataclass(frozen=True, order=True, kw_only=True)
class NamespacedName:
    """Identifies an object by namespace and name."""

    namespace: str = ""
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class ObjectMeta:
    """Metadata shared by all stored objects."""

    name: str
    namespace: str = ""
    generation: int = 0
    resource_version: str = ""
    deletion_timestamp: datetime | None = None

    @property
    def key(self) -> NamespacedName:
        return NamespacedName(namespace=self.namespace, name=self.name)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Condition:
    """A status condition of an object."""

    type: str
    status: str
    reason: str
    message: str
    observed_generation: int = 0
    last_transition_time: datetime = field(default_factory=_now)


class _Object:
    metadata: ObjectMeta
    conditions: list[Condition]

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def generation(self) -> int:
        return self.metadata.generation

    @property
    def key(self) -> NamespacedName:
        return self.metadata.key


@dataclass
class GatewayClass(_Object):
    """A cluster-scoped class of gateways handled by one controller."""

    metadata: ObjectMeta
    controller_name: str = ""
    conditions: list[Condition] = field(default_factory=list)


@dataclass
class Gateway(_Object):
    """A gateway that refers to a GatewayClass by name."""

    metadata: ObjectMeta
    gateway_class_name: str = ""
    conditions: list[Condition] = field(default_factory=list)


ApiObject = Union[Gateway, GatewayClass]
T = TypeVar("T", Gateway, GatewayClass)


@dataclass(frozen=True)
class Request:
    """A request to reconcile the object with the given key."""

    namespaced_name: NamespacedName

    def __str__(self) -> str:
        return str(self.namespaced_name)


@dataclass(frozen=True)
class Result:
    """The outcome of a reconcile: whether and when to try again."""

    requeue: bool = False
    requeue_after: float = 0.0


class ApiError(Exception):
    """An error reported by the object store."""


class NotFoundError(ApiError):
    """The requested object does not exist."""


class ConflictError(ApiError):
    """The object was modified since it was read."""


class MemoryClient:
    """An object store kept in memory, with optimistic concurrency.

    Objects are copied on the way in and out, so callers never share state
    with the store.
    """

    def __init__(self, objects: Iterable[ApiObject] = ()) -> None:
        self._store: dict[tuple[type, NamespacedName], ApiObject] = {}
        self._versions = itertools.count(1)
        for obj in objects:
            self.add(obj)

    def _next_version(self) -> str:
        return str(next(self._versions))

    def add(self, obj: ApiObject) -> None:
        """Store a new object; raise ApiError if it already exists."""
        slot = (type(obj), obj.key)
        if slot in self._store:
            raise ApiError(f'{type(obj).__name__} "{obj.key}" already exists')
        stored = copy.deepcopy(obj)
        stored.metadata.resource_version = self._next_version()
        self._store[slot] = stored

    def get(self, kind: type[T], key: NamespacedName) -> T:
        """Return a copy of the object of ``kind`` stored under ``key``."""
        try:
            stored = self._store[(kind, key)]
        except KeyError:
            raise NotFoundError(f'{kind.__name__} "{key}" not found') from None
        return copy.deepcopy(stored)

    def list(self, kind: type[T]) -> list[T]:
        """Return copies of all objects of ``kind``, ordered by key."""
        found = [
            obj for (stored_kind, _), obj in self._store.items() if stored_kind is kind
        ]
        found.sort(key=lambda obj: obj.key)
        return [copy.deepcopy(obj) for obj in found]

    def update_status(self, obj: ApiObject) -> None:
        """Write the status of ``obj`` to the store.

        Raises NotFoundError if the object is not stored and ConflictError if
        it carries a resource version other than the stored one. On success
        the new resource version is written back into ``obj``.
        """
        slot = (type(obj), obj.key)
        stored = self._store.get(slot)
        if stored is None:
            raise NotFoundError(f'{type(obj).__name__} "{obj.key}" not found')
        wanted = obj.metadata.resource_version
        if wanted and wanted != stored.metadata.resource_version:
            raise ConflictError(
                f'{type(obj).__name__} "{obj.key}" has been modified; '
                "apply the changes to the latest version and try again"
            )
        stored.conditions = copy.deepcopy(obj.conditions)
        stored.metadata.resource_version = self._next_version()
        obj.metadata.resource_version = stored.metadata.resource_version

    def delete(self, kind: type[ApiObject], key: NamespacedName) -> None:
        """Remove the object of ``kind`` stored under ``key``."""
        try:
            del self._store[(kind, key)]
        except KeyError:
            raise NotFoundError(f'{kind.__name__} "{key}" not found') from None
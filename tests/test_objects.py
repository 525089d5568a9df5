import pytest

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
    ObjectMeta,
    Request,
    Result,
)


def _gateway(name, class_name="k8s.io/ingate", namespace="default"):
    return Gateway(
        metadata=ObjectMeta(name=name, namespace=namespace),
        gateway_class_name=class_name,
    )


def _gateway_class(name, controller=INGATE_CONTROLLER_NAME):
    return GatewayClass(metadata=ObjectMeta(name=name), controller_name=controller)


def _accepted(generation=0):
    return Condition(
        type=ACCEPTED,
        status=CONDITION_TRUE,
        reason="Accepted",
        message="Gateway has been accepted by the InGate Controller.",
        observed_generation=generation,
    )


def test_namespaced_name_string():
    key = NamespacedName(namespace="default", name="ingate")
    assert str(key) == "default/ingate"
    assert str(Request(key)) == str(key)


def test_namespaced_name_ordering():
    a = NamespacedName(namespace="a", name="z")
    b = NamespacedName(namespace="b", name="a")
    assert sorted([b, a]) == [a, b]


def test_result_defaults():
    assert Result() == Result(requeue=False, requeue_after=0.0)
    assert Result(requeue=True).requeue is True


def test_client_errors_are_api_errors():
    client = MemoryClient([_gateway("ingate")])
    key = NamespacedName(namespace="default", name="ingate")
    with pytest.raises(ApiError) as missing:
        client.get(Gateway, NamespacedName(namespace="default", name="nope"))
    assert isinstance(missing.value, NotFoundError)

    stale = client.get(Gateway, key)
    client.update_status(client.get(Gateway, key))
    with pytest.raises(ApiError) as conflict:
        client.update_status(stale)
    assert isinstance(conflict.value, ConflictError)


def test_add_and_get_round_trip():
    client = MemoryClient()
    client.add(_gateway("ingate"))
    got = client.get(Gateway, NamespacedName(namespace="default", name="ingate"))
    assert got.name == "ingate"
    assert got.namespace == "default"
    assert got.gateway_class_name == "k8s.io/ingate"
    assert got.metadata.resource_version


def test_get_returns_independent_copy():
    client = MemoryClient([_gateway("ingate")])
    key = NamespacedName(namespace="default", name="ingate")
    got = client.get(Gateway, key)
    got.gateway_class_name = "changed"
    assert client.get(Gateway, key).gateway_class_name == "k8s.io/ingate"


def test_get_missing_raises_not_found():
    client = MemoryClient()
    with pytest.raises(NotFoundError):
        client.get(Gateway, NamespacedName(namespace="default", name="nope"))


def test_get_distinguishes_kinds():
    client = MemoryClient([_gateway_class("shared")])
    with pytest.raises(NotFoundError):
        client.get(Gateway, NamespacedName(name="shared"))
    assert client.get(GatewayClass, NamespacedName(name="shared")).name == "shared"


def test_add_duplicate_raises():
    client = MemoryClient([_gateway("ingate")])
    with pytest.raises(ApiError):
        client.add(_gateway("ingate"))


def test_list_filters_kind_and_orders_by_key():
    client = MemoryClient(
        [
            _gateway("b", namespace="default"),
            _gateway("a", namespace="other"),
            _gateway("a", namespace="default"),
            _gateway_class("k8s.io/ingate"),
        ]
    )
    keys = [(gw.namespace, gw.name) for gw in client.list(Gateway)]
    assert keys == [("default", "a"), ("default", "b"), ("other", "a")]
    assert [gwc.name for gwc in client.list(GatewayClass)] == ["k8s.io/ingate"]


def test_update_status_stores_conditions():
    client = MemoryClient([_gateway("ingate")])
    key = NamespacedName(namespace="default", name="ingate")
    gw = client.get(Gateway, key)
    gw.conditions = [_accepted()]
    client.update_status(gw)
    stored = client.get(Gateway, key)
    assert [c.type for c in stored.conditions] == [ACCEPTED]
    assert stored.conditions[0].status == CONDITION_TRUE
    assert stored.metadata.resource_version == gw.metadata.resource_version


def test_update_status_only_changes_status():
    client = MemoryClient([_gateway("ingate")])
    key = NamespacedName(namespace="default", name="ingate")
    gw = client.get(Gateway, key)
    gw.gateway_class_name = "other"
    gw.conditions = [_accepted()]
    client.update_status(gw)
    assert client.get(Gateway, key).gateway_class_name == "k8s.io/ingate"


def test_stale_update_raises_conflict():
    client = MemoryClient([_gateway("ingate")])
    key = NamespacedName(namespace="default", name="ingate")
    first = client.get(Gateway, key)
    second = client.get(Gateway, key)
    first.conditions = [_accepted()]
    client.update_status(first)
    second.conditions = [_accepted()]
    with pytest.raises(ConflictError):
        client.update_status(second)


def test_fresh_read_after_conflict_succeeds():
    client = MemoryClient([_gateway("ingate")])
    key = NamespacedName(namespace="default", name="ingate")
    stale = client.get(Gateway, key)
    client.update_status(client.get(Gateway, key))
    with pytest.raises(ConflictError):
        client.update_status(stale)
    fresh = client.get(Gateway, key)
    fresh.conditions = [_accepted(3)]
    client.update_status(fresh)
    assert client.get(Gateway, key).conditions[0].observed_generation == 3


def test_update_status_missing_raises_not_found():
    client = MemoryClient()
    with pytest.raises(NotFoundError):
        client.update_status(_gateway("ingate"))


def test_delete_removes_object():
    client = MemoryClient([_gateway_class("k8s.io/ingate")])
    key = NamespacedName(name="k8s.io/ingate")
    client.delete(GatewayClass, key)
    with pytest.raises(NotFoundError):
        client.get(GatewayClass, key)
    with pytest.raises(NotFoundError):
        client.delete(GatewayClass, key)
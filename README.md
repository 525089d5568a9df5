# ingate

The core of a Gateway controller. It reconciles `GatewayClass` and `Gateway`
objects whose controller name is `k8s.io/ingate` and marks them with an
`Accepted` condition. The reconcilers run under a small `Manager` that
dispatches events, retries requeued work and runs health and readiness
checks. Objects live in `MemoryClient`, an in-memory store with resource
versions and conflict detection.

## Installing

```
pip install .
```

## Command line

Show the version information (`INGATE_VERSION`, `GIT_COMMIT_ID` and
`PYTHON_VERSION`, one per line):

```
ingate version
```

Start the controller. It runs until it receives SIGINT or SIGTERM:

```
ingate start
```

`ingate start -v 2` (or `--v 2`) turns on debug logging; lower values log at
info level. `ingate v` / `ingate versions` and `ingate s` are short forms of
the two commands. With no command, the help text is printed.

## Library use

```python
from ingate.controlplane.objects import (
    Gateway, GatewayClass, MemoryClient, NamespacedName, ObjectMeta, Request,
)
from ingate.controlplane.gateway import GatewayReconciler

client = MemoryClient()
client.add(GatewayClass(metadata=ObjectMeta(name="ingate"),
                        controller_name="k8s.io/ingate"))
client.add(Gateway(metadata=ObjectMeta(name="web", namespace="default"),
                   gateway_class_name="ingate"))

key = NamespacedName(name="web", namespace="default")
result = GatewayReconciler(client).reconcile(Request(key))
accepted = client.get(Gateway, key).conditions[0]
assert accepted.type == "Accepted" and accepted.status == "True"
```

Modules:

- `ingate.controlplane.objects`: `Gateway`, `GatewayClass`, `ObjectMeta`,
  `Condition`, `NamespacedName`, `Request`, `Result`, the errors `ApiError`,
  `NotFoundError` and `ConflictError`, and `MemoryClient` with `add`, `get`,
  `list`, `update_status` and `delete`.
- `ingate.controlplane.predicates`: `match_gateway_controller_name` and
  `match_gateway_class_controller_name`, filters that select the objects of
  a given controller name.
- `ingate.controlplane.gatewayclass`: `GatewayClassReconciler`. Missing
  classes, classes of other controllers and classes being deleted are left
  alone; errors from the status update are raised.
- `ingate.controlplane.gateway`: `GatewayReconciler`. Its
  `gateway_class_requests` maps a `GatewayClass` to requests for every
  gateway that uses it. On a conflict the status update is retried a few
  times and the error is still raised.
- `ingate.controlplane.manager`: `Manager`, `Controller`, `Watch`, the
  `ping` check and `start(client, stop_event=None)`, which wires both
  reconcilers into a manager, reconciles every stored object once and then
  retries requeued work until `stop_event` is set.
- `ingate.controlplane.ingress`: the `Configuration` settings for
  IngressClass matching and the `INGRESS_KEY`, `DEFAULT_CONTROLLER_NAME` and
  `DEFAULT_ANNOTATION_VALUE` constants.
- `ingate.version`: `Version`, `get_version` and `print_version`.

## What it does not do

- It does not connect to a Kubernetes API server. `ingate start` runs
  against an empty `MemoryClient`, so it has nothing to reconcile until
  objects are added through the library.
- It serves no HTTP endpoints. The manager's health-probe and metrics bind
  addresses are stored but nothing listens on them; run the checks with
  `Manager.healthz()` and `Manager.readyz()`.
- There is no leader election; the setting is stored only.
- Ingress resources are not reconciled; `ingress.Configuration` holds
  settings only.
- `Manager.start` does not watch the store for changes; call
  `Manager.dispatch(obj)` to deliver an event.

## Tests

```
pip install .[test]
pytest
```
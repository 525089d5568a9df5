"""Control plane: objects and store, predicates, reconcilers, manager and ingress settings."""
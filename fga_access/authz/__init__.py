"""
Relationship-based authorization against an OpenFGA server.

Tuple expansion, model id resolution, fail-safe policy, request dispatch
and store/model bootstrap.
"""

from .bootstrap import (
    AuthorizationModelDocument,
    create_openfga_client,
    ensure_authorization_model,
    ensure_store,
    initialize_openfga,
    seed_initial_relations,
)
from .identity import AuthorizationContext, resolve_model_id
from .policy import FAIL_SAFE_POLICIES, FailSafe, Operation, policy_for
from .provider import OpenFgaAdapter, RelationshipProvider
from .tuples import (
    RelationTuple,
    TupleOperation,
    WriteBatch,
    expand_check_triples,
    expand_deletes,
    expand_writes,
)

__all__ = [
    # Identity
    "AuthorizationContext",
    "resolve_model_id",
    # Tuples
    "RelationTuple",
    "TupleOperation",
    "WriteBatch",
    "expand_writes",
    "expand_deletes",
    "expand_check_triples",
    # Policy
    "Operation",
    "FailSafe",
    "FAIL_SAFE_POLICIES",
    "policy_for",
    # Provider
    "RelationshipProvider",
    "OpenFgaAdapter",
    # Bootstrap
    "AuthorizationModelDocument",
    "create_openfga_client",
    "ensure_store",
    "ensure_authorization_model",
    "seed_initial_relations",
    "initialize_openfga",
]

"""
Fail-safe policy for requests to the OpenFGA server.

Every dispatcher operation has exactly one entry in FAIL_SAFE_POLICIES
saying what the caller gets when the remote call fails:

    add_relations     SILENT     completes as if it succeeded (fail-open)
    remove_relations  SILENT     completes as if it succeeded (fail-open)
    check             DENY       False (fail-closed)
    list_objects      EMPTY      empty set (fail-closed)
    list_relations    EMPTY      empty set (fail-closed)
    batch_check       PROPAGATE  the original error is re-raised

Callers of check/list_* cannot tell "denied" from "server unreachable".
Callers of the mutations must not assume the relation state changed.
"""

import enum
from types import MappingProxyType
from typing import Any, Mapping


class Operation(str, enum.Enum):
    """Operations the dispatcher sends to the OpenFGA server."""

    ADD_RELATIONS = "add_relations"
    REMOVE_RELATIONS = "remove_relations"
    CHECK = "check"
    BATCH_CHECK = "batch_check"
    LIST_OBJECTS = "list_objects"
    LIST_RELATIONS = "list_relations"


class FailSafe(str, enum.Enum):
    """What a failed remote call turns into."""

    SILENT = "silent"
    DENY = "deny"
    EMPTY = "empty"
    PROPAGATE = "propagate"

    @property
    def propagates(self) -> bool:
        return self is FailSafe.PROPAGATE

    def fallback(self) -> Any:
        """
        Value returned to the caller instead of the failed result.

        Raises:
            ValueError: For PROPAGATE, which has no fallback value
        """
        if self is FailSafe.SILENT:
            return None
        if self is FailSafe.DENY:
            return False
        if self is FailSafe.EMPTY:
            return set()
        raise ValueError(f"Fail-safe policy '{self.value}' has no fallback value")


# TODO: batch_check propagates while every other read fails closed; switch it
# to DENY-per-triple once callers relying on the raised error are migrated.
FAIL_SAFE_POLICIES: Mapping[Operation, FailSafe] = MappingProxyType(
    {
        Operation.ADD_RELATIONS: FailSafe.SILENT,
        Operation.REMOVE_RELATIONS: FailSafe.SILENT,
        Operation.CHECK: FailSafe.DENY,
        Operation.BATCH_CHECK: FailSafe.PROPAGATE,
        Operation.LIST_OBJECTS: FailSafe.EMPTY,
        Operation.LIST_RELATIONS: FailSafe.EMPTY,
    }
)


def policy_for(operation: Operation) -> FailSafe:
    """Look up the fail-safe policy of an operation."""
    return FAIL_SAFE_POLICIES[operation]

"""
Pytest configuration and shared fixtures for FGA_ACCESS tests.

This module provides:
- Mock OpenFGA client fixtures
- An in-memory OpenFGA stand-in for end-to-end scenarios
- Environment isolation for FGA_* variables
"""

from typing import Any, Dict, List, Optional, Set, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest
from openfga_sdk.client.models import (
    ClientWriteRequestOnDuplicateWrites,
    ClientWriteRequestOnMissingDeletes,
)

from fga_access.authz.identity import AuthorizationContext
from fga_access.authz.provider import OpenFgaAdapter
from fga_access.constants import (
    ENV_API_TOKEN,
    ENV_API_URL,
    ENV_MODEL_ID,
    ENV_STORE_ID,
    ENV_STORE_NAME,
)
from fga_access.observability import get_metrics_collector

STORE_ID = "01HVMMBCMGZNT3SED4Z17ECXCA"
MODEL_ID = "01HVMMBD123FTGBRBNXRRRPMXB"

# ============================================================================
# ISOLATION
# ============================================================================


@pytest.fixture(autouse=True)
def clean_fga_environment(monkeypatch):
    """Make sure FGA_* variables from the host never leak into tests."""
    for name in (ENV_API_URL, ENV_STORE_ID, ENV_MODEL_ID, ENV_API_TOKEN, ENV_STORE_NAME):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_observability():
    """Reset global metrics around each test."""
    get_metrics_collector().reset()
    yield
    get_metrics_collector().reset()


# ============================================================================
# MOCK OPENFGA FIXTURES
# ============================================================================


@pytest.fixture
def mock_fga_client() -> MagicMock:
    """Create a mock OpenFGA client whose remote calls all succeed."""
    client = MagicMock()
    client.write = AsyncMock(return_value=MagicMock())
    client.check = AsyncMock(return_value=MagicMock(allowed=True))
    client.batch_check = AsyncMock(return_value=MagicMock(result=[]))
    client.list_objects = AsyncMock(return_value=MagicMock(objects=[]))
    client.list_relations = AsyncMock(return_value=[])
    client.create_store = AsyncMock(return_value=MagicMock(id=STORE_ID))
    client.write_authorization_model = AsyncMock(
        return_value=MagicMock(authorization_model_id=MODEL_ID)
    )
    client.close = AsyncMock()
    return client


@pytest.fixture
def authz_context() -> AuthorizationContext:
    """Context as produced by a completed bootstrap."""
    return AuthorizationContext(authorization_model_id=MODEL_ID, store_id=STORE_ID)


@pytest.fixture
def adapter(mock_fga_client: MagicMock, authz_context: AuthorizationContext) -> OpenFgaAdapter:
    """OpenFgaAdapter wired to the mock client."""
    return OpenFgaAdapter(mock_fga_client, authz_context)


@pytest.fixture
def sample_model_document() -> str:
    """Minimal JSON authorization model with users and documents."""
    return """
    {
      "schema_version": "1.1",
      "type_definitions": [
        {"type": "user"},
        {
          "type": "doc",
          "relations": {
            "editor": {"this": {}},
            "viewer": {"union": {"child": [{"this": {}}, {"computedUserset": {"relation": "editor"}}]}}
          },
          "metadata": {
            "relations": {
              "editor": {"directly_related_user_types": [{"type": "user"}]},
              "viewer": {"directly_related_user_types": [{"type": "user"}]}
            }
          }
        }
      ]
    }
    """


# ============================================================================
# IN-MEMORY OPENFGA
# ============================================================================


class InMemoryFgaClient:
    """
    Tiny stand-in for OpenFgaClient that persists tuples and answers
    direct-relation queries. No userset rewrites.

    Like the server, a write naming a present tuple or a delete naming an
    absent one rejects the whole request unless the write options ask for
    such conflicts to be ignored.
    """

    def __init__(self) -> None:
        self.tuples: Set[Tuple[str, str, str]] = set()
        self.requests: List[Tuple[str, Any, Optional[Dict[str, Any]]]] = []

    async def write(self, body, options=None):
        self.requests.append(("write", body, options))
        conflict = (options or {}).get("conflict")
        writes = [(key.user, key.relation, key.object) for key in body.writes or []]
        deletes = [(key.user, key.relation, key.object) for key in body.deletes or []]

        if conflict is None or conflict.on_duplicate_writes != ClientWriteRequestOnDuplicateWrites.IGNORE:
            present = [t for t in writes if t in self.tuples]
            if present:
                raise ValueError(f"cannot write a tuple which already exists: {present[0]}")
        if conflict is None or conflict.on_missing_deletes != ClientWriteRequestOnMissingDeletes.IGNORE:
            missing = [t for t in deletes if t not in self.tuples]
            if missing:
                raise ValueError(f"cannot delete a tuple which does not exist: {missing[0]}")

        self.tuples.update(writes)
        self.tuples.difference_update(deletes)

    async def check(self, body, options=None):
        self.requests.append(("check", body, options))
        return MagicMock(allowed=(body.user, body.relation, body.object) in self.tuples)

    async def batch_check(self, body, options=None):
        self.requests.append(("batch_check", body, options))
        return MagicMock(
            result=[
                MagicMock(
                    correlation_id=item.correlation_id,
                    allowed=(item.user, item.relation, item.object) in self.tuples,
                    error=None,
                )
                for item in body.checks
            ]
        )

    async def list_objects(self, body, options=None):
        self.requests.append(("list_objects", body, options))
        objects = [
            obj
            for user, relation, obj in self.tuples
            if user == body.user and relation == body.relation and obj.startswith(f"{body.type}:")
        ]
        return MagicMock(objects=objects)

    async def list_relations(self, body, options=None):
        self.requests.append(("list_relations", body, options))
        return [r for r in body.relations if (body.user, r, body.object) in self.tuples]

    async def close(self):
        pass


@pytest.fixture
def in_memory_client() -> InMemoryFgaClient:
    return InMemoryFgaClient()


@pytest.fixture
def in_memory_adapter(
    in_memory_client: InMemoryFgaClient, authz_context: AuthorizationContext
) -> OpenFgaAdapter:
    return OpenFgaAdapter(in_memory_client, authz_context)

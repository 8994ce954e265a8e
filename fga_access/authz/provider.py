"""
Relationship Authorization Provider

Dispatches relationship writes and access queries to an OpenFGA server.
Tuples are expanded locally, the model id is resolved once per call, and
every remote call goes through the same fail-safe wrapper so the outcome
on error is decided by FAIL_SAFE_POLICIES alone.

This module is part of FGA_ACCESS.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Protocol, Set

from openfga_sdk.client import OpenFgaClient
from openfga_sdk.client.models import (
    ClientBatchCheckItem,
    ClientBatchCheckRequest,
    ClientCheckRequest,
    ClientListObjectsRequest,
    ClientListRelationsRequest,
    ClientTuple,
    ClientWriteRequest,
    ClientWriteRequestOnDuplicateWrites,
    ClientWriteRequestOnMissingDeletes,
    ConflictOptions,
)

from ..constants import METRIC_PREFIX
from ..observability import get_logger, log_operation, record_operation
from .identity import AuthorizationContext, resolve_model_id
from .policy import Operation, policy_for
from .tuples import RelationTuple, TupleOperation, WriteBatch, expand_check_triples

logger = logging.getLogger(__name__)


class RelationshipProvider(Protocol):
    """
    Defines the "contract" for a relationship-based authorization provider.
    """

    async def add_relations(
        self,
        subjects: Iterable[str],
        relations: Iterable[str],
        objects: Iterable[str],
        authorization_model_id: Optional[str] = None,
    ) -> None:
        ...

    async def remove_relations(
        self,
        subjects: Iterable[str],
        relations: Iterable[str],
        objects: Iterable[str],
        authorization_model_id: Optional[str] = None,
    ) -> None:
        ...

    async def check(
        self,
        subject: str,
        relation: str,
        obj: str,
        authorization_model_id: Optional[str] = None,
    ) -> Optional[bool]:
        ...

    async def batch_check(
        self,
        subjects: Iterable[str],
        relations: Iterable[str],
        objects: Iterable[str],
        authorization_model_id: Optional[str] = None,
    ) -> Dict[RelationTuple, bool]:
        ...

    async def list_objects(
        self,
        subject: str,
        relation: str,
        object_type: str,
        authorization_model_id: Optional[str] = None,
    ) -> Set[str]:
        ...

    async def list_relations(
        self,
        subject: str,
        relations: Iterable[str],
        obj: str,
        authorization_model_id: Optional[str] = None,
    ) -> Set[str]:
        ...


class OpenFgaAdapter:
    """
    Implements the RelationshipProvider interface on top of the OpenFGA
    async client.

    The adapter holds no mutable state of its own: the authorization
    context is fixed at construction, so concurrent calls need no lock.
    Nothing is retried or cached here.
    """

    def __init__(self, client: OpenFgaClient, context: AuthorizationContext):
        """
        Initializes the adapter with a configured OpenFGA client.

        Args:
            client: OpenFGA client bound to the active store
            context: Store id and default model id captured at bootstrap
        """
        self._client = client
        self._context = context
        self._log = get_logger(
            __name__,
            store_id=context.store_id,
            authorization_model_id=context.authorization_model_id,
        )
        self._log.info(
            f"OpenFgaAdapter initialized (store={context.store_id}, "
            f"model={context.authorization_model_id})"
        )

    @property
    def ids(self) -> AuthorizationContext:
        """The store id and default model id this adapter targets."""
        return self._context

    @staticmethod
    def _options(model_id: str) -> Dict[str, Any]:
        return {"authorization_model_id": model_id}

    @classmethod
    def _write_options(cls, model_id: str) -> Dict[str, Any]:
        # Writing a present tuple or deleting an absent one is a no-op.
        return {
            **cls._options(model_id),
            "conflict": ConflictOptions(
                on_duplicate_writes=ClientWriteRequestOnDuplicateWrites.IGNORE,
                on_missing_deletes=ClientWriteRequestOnMissingDeletes.IGNORE,
            ),
        }

    async def _dispatch(
        self,
        operation: Operation,
        call: Callable[[], Awaitable[Any]],
        **log_context: Any,
    ) -> Any:
        """
        Run one remote call under the operation's fail-safe policy.

        Returns the call's result, or the policy fallback if it failed.
        PROPAGATE re-raises the original exception.
        """
        policy = policy_for(operation)
        metric_name = f"{METRIC_PREFIX}.{operation.value}"
        start_time = time.time()

        try:
            result = await call()
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            record_operation(metric_name, duration_ms, success=False, fail_safe=policy.value)
            log_operation(
                self._log,
                operation.value,
                success=False,
                duration_ms=duration_ms,
                exc_info=True,
                error_type=type(e).__name__,
                error=str(e),
                fail_safe=policy.value,
                **log_context,
            )
            if policy.propagates:
                raise
            return policy.fallback()

        duration_ms = (time.time() - start_time) * 1000
        record_operation(metric_name, duration_ms, success=True)
        log_operation(
            self._log,
            operation.value,
            duration_ms=duration_ms,
            **log_context,
        )
        return result

    async def _write(
        self,
        operation: Operation,
        batch: WriteBatch,
        authorization_model_id: Optional[str],
    ) -> None:
        model_id = resolve_model_id(self._context, authorization_model_id)

        if not batch:
            logger.debug(f"{operation.value}: empty expansion, nothing to send.")
            return None

        async def call() -> None:
            keys = [
                ClientTuple(user=t.subject, relation=t.relation, object=t.object)
                for t in batch
            ]
            if batch.operation is TupleOperation.WRITE:
                body = ClientWriteRequest(writes=keys)
            else:
                body = ClientWriteRequest(deletes=keys)
            await self._client.write(body, self._write_options(model_id))

        await self._dispatch(
            operation,
            call,
            tuple_count=len(batch),
            authorization_model_id=model_id,
        )
        return None

    async def add_relations(
        self,
        subjects: Iterable[str],
        relations: Iterable[str],
        objects: Iterable[str],
        authorization_model_id: Optional[str] = None,
    ) -> None:
        """
        Grant every (subject, relation, object) combination in one write.

        Best-effort: a failed write is logged and swallowed, so callers must
        not assume the relations now exist.
        """
        batch = WriteBatch.build(TupleOperation.WRITE, subjects, relations, objects)
        await self._write(Operation.ADD_RELATIONS, batch, authorization_model_id)

    async def remove_relations(
        self,
        subjects: Iterable[str],
        relations: Iterable[str],
        objects: Iterable[str],
        authorization_model_id: Optional[str] = None,
    ) -> None:
        """
        Revoke every (subject, relation, object) combination in one write.

        Best-effort, like add_relations.
        """
        batch = WriteBatch.build(TupleOperation.DELETE, subjects, relations, objects)
        await self._write(Operation.REMOVE_RELATIONS, batch, authorization_model_id)

    async def check(
        self,
        subject: str,
        relation: str,
        obj: str,
        authorization_model_id: Optional[str] = None,
    ) -> Optional[bool]:
        """
        Point check of a single relation.

        Returns True or False, or None when the server gave no answer.
        Any failure resolves to False.
        """
        model_id = resolve_model_id(self._context, authorization_model_id)

        async def call() -> Optional[bool]:
            body = ClientCheckRequest(user=subject, relation=relation, object=obj)
            response = await self._client.check(body, self._options(model_id))
            return response.allowed

        return await self._dispatch(
            Operation.CHECK,
            call,
            subject=subject,
            relation=relation,
            resource=obj,
            authorization_model_id=model_id,
        )

    async def batch_check(
        self,
        subjects: Iterable[str],
        relations: Iterable[str],
        objects: Iterable[str],
        authorization_model_id: Optional[str] = None,
    ) -> Dict[RelationTuple, bool]:
        """
        Check every (subject, relation, object) combination in one request.

        Returns allow/deny per triple. A triple the server reports an error
        for is denied. Unlike the other reads, a failed request raises.
        """
        model_id = resolve_model_id(self._context, authorization_model_id)
        triples = {
            str(index): triple
            for index, triple in enumerate(expand_check_triples(subjects, relations, objects))
        }

        if not triples:
            logger.debug("batch_check: empty expansion, nothing to send.")
            return {}

        async def call() -> Dict[RelationTuple, bool]:
            checks = [
                ClientBatchCheckItem(
                    user=t.subject,
                    relation=t.relation,
                    object=t.object,
                    correlation_id=correlation_id,
                )
                for correlation_id, t in triples.items()
            ]
            response = await self._client.batch_check(
                ClientBatchCheckRequest(checks=checks), self._options(model_id)
            )

            results: Dict[RelationTuple, bool] = {}
            for single in response.result:
                triple = triples[single.correlation_id]
                if single.error:
                    logger.debug(f"batch_check: error for {triple}: {single.error}")
                results[triple] = bool(single.allowed) and not single.error
            return results

        return await self._dispatch(
            Operation.BATCH_CHECK,
            call,
            check_count=len(triples),
            authorization_model_id=model_id,
        )

    async def list_objects(
        self,
        subject: str,
        relation: str,
        object_type: str,
        authorization_model_id: Optional[str] = None,
    ) -> Set[str]:
        """
        Objects of ``object_type`` the subject holds ``relation`` on.

        Any failure resolves to an empty set.
        """
        model_id = resolve_model_id(self._context, authorization_model_id)

        async def call() -> Set[str]:
            body = ClientListObjectsRequest(user=subject, relation=relation, type=object_type)
            response = await self._client.list_objects(body, self._options(model_id))
            return set(response.objects)

        return await self._dispatch(
            Operation.LIST_OBJECTS,
            call,
            subject=subject,
            relation=relation,
            object_type=object_type,
            authorization_model_id=model_id,
        )

    async def list_relations(
        self,
        subject: str,
        relations: Iterable[str],
        obj: str,
        authorization_model_id: Optional[str] = None,
    ) -> Set[str]:
        """
        The subset of ``relations`` the subject holds on ``obj``.

        Any failure resolves to an empty set.
        """
        model_id = resolve_model_id(self._context, authorization_model_id)
        candidates = list(relations)

        if not candidates:
            return set()

        async def call() -> Set[str]:
            body = ClientListRelationsRequest(user=subject, relations=candidates, object=obj)
            return set(await self._client.list_relations(body, self._options(model_id)))

        return await self._dispatch(
            Operation.LIST_RELATIONS,
            call,
            subject=subject,
            resource=obj,
            candidate_count=len(candidates),
            authorization_model_id=model_id,
        )

    async def close(self) -> None:
        """Close the underlying OpenFGA client session."""
        await self._client.close()
        logger.info("OpenFgaAdapter closed.")

    async def __aenter__(self) -> "OpenFgaAdapter":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

"""
OpenFGA Bootstrap

Makes sure a store and an authorization model exist before any
relationship traffic, then hands back a ready OpenFgaAdapter.

Bootstrap is meant to run once, before concurrent use. Two bootstraps
racing each other can create two stores.

This module is part of FGA_ACCESS.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Union

from openfga_sdk import CreateStoreRequest, WriteAuthorizationModelRequest
from openfga_sdk.client import ClientConfiguration, OpenFgaClient
from openfga_sdk.credentials import CredentialConfiguration, Credentials
from pydantic import BaseModel, Field, ValidationError

from ..config import FgaConfig
from ..exceptions import FgaAccessError, InitializationError, ModelDocumentError
from ..observability import get_logger, record_operation
from .identity import AuthorizationContext
from .provider import OpenFgaAdapter

logger = logging.getLogger(__name__)
bootstrap_logger = get_logger(__name__)


class AuthorizationModelDocument(BaseModel):
    """
    JSON authorization model, as produced by ``fga model transform``.

    Only the top-level shape is checked; the server validates the rest.
    """

    schema_version: str = "1.1"
    type_definitions: List[Dict[str, Any]] = Field(min_length=1)
    conditions: Optional[Dict[str, Any]] = None

    @classmethod
    def parse(cls, text: str) -> "AuthorizationModelDocument":
        """
        Parse a textual model document.

        Raises:
            ModelDocumentError: If the text is not a valid model document
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            error_paths = [
                ".".join(str(part) for part in error["loc"]) or "<root>" for error in e.errors()
            ]
            raise ModelDocumentError(
                f"Invalid authorization model document: {e.error_count()} error(s)",
                error_paths=error_paths,
            ) from e

    def to_request(self) -> WriteAuthorizationModelRequest:
        return WriteAuthorizationModelRequest(**self.model_dump(exclude_none=True))


def create_openfga_client(config: FgaConfig) -> OpenFgaClient:
    """
    Create an OpenFGA client from configuration.

    No request is made here; the connection happens on the first call.
    """
    credentials = None
    if config.api_token:
        credentials = Credentials(
            method="api_token",
            configuration=CredentialConfiguration(api_token=config.api_token),
        )

    configuration = ClientConfiguration(
        api_url=config.api_url,
        store_id=config.store_id,
        authorization_model_id=config.authorization_model_id,
        credentials=credentials,
    )
    logger.debug(f"Creating OpenFGA client for {config!r}")
    return OpenFgaClient(configuration)


async def ensure_store(client: OpenFgaClient, store_name: str) -> str:
    """
    Return the client's store id, creating a store first if it has none.
    """
    store_id = client.get_store_id()
    if store_id:
        logger.debug(f"Using configured store '{store_id}'")
        return store_id

    response = await client.create_store(CreateStoreRequest(name=store_name))
    client.set_store_id(response.id)
    logger.info(f"Created OpenFGA store '{store_name}' ({response.id})")
    return response.id


async def ensure_authorization_model(
    client: OpenFgaClient,
    relationship_model: Union[str, AuthorizationModelDocument],
) -> str:
    """
    Return the client's model id, writing ``relationship_model`` first if
    it has none. The document is only parsed when it is actually needed.
    """
    model_id = client.get_authorization_model_id()
    if model_id:
        logger.debug(f"Using configured authorization model '{model_id}'")
        return model_id

    if isinstance(relationship_model, str):
        relationship_model = AuthorizationModelDocument.parse(relationship_model)

    response = await client.write_authorization_model(relationship_model.to_request())
    client.set_authorization_model_id(response.authorization_model_id)
    logger.info(f"Wrote authorization model {response.authorization_model_id}")
    return response.authorization_model_id


async def seed_initial_relations(
    adapter: OpenFgaAdapter,
    initial_relations: List[Dict[str, Any]],
) -> None:
    """
    Write initial relations, e.g.:
        [{"subjects": ["user:anne"], "relations": ["owner"], "objects": ["doc:1"]}]

    Entries missing a key are skipped. Writes are best-effort like any
    other add_relations call.
    """
    for entry in initial_relations:
        subjects = entry.get("subjects")
        relations = entry.get("relations")
        objects = entry.get("objects")
        if not (subjects and relations and objects):
            logger.warning(f"Skipping incomplete initial relation entry: {entry}")
            continue
        await adapter.add_relations(
            subjects, relations, objects, entry.get("authorization_model_id")
        )


async def initialize_openfga(
    relationship_model: Union[str, AuthorizationModelDocument],
    api_url: Optional[str] = None,
    store_id: Optional[str] = None,
    authorization_model_id: Optional[str] = None,
    api_token: Optional[str] = None,
    store_name: Optional[str] = None,
    initial_relations: Optional[List[Dict[str, Any]]] = None,
) -> OpenFgaAdapter:
    """
    Provision the store and model and return a ready adapter.

    Args:
        relationship_model: Model document, written only if no model id is configured
        api_url: OpenFGA API URL (FGA_API_URL wins)
        store_id: Existing store id (FGA_STORE_ID wins)
        authorization_model_id: Existing default model id (FGA_MODEL_ID wins)
        api_token: Optional API token (FGA_API_TOKEN wins)
        store_name: Name for a newly created store (FGA_STORE_NAME wins)
        initial_relations: Optional relations to write after provisioning

    Raises:
        ConfigurationError: If the configuration is invalid
        ModelDocumentError: If the model document had to be written and is invalid
        InitializationError: If the server could not provision the store or model
    """
    start_time = time.time()
    config = FgaConfig(
        api_url=api_url,
        store_id=store_id,
        authorization_model_id=authorization_model_id,
        api_token=api_token,
        store_name=store_name,
    )
    config.validate()

    bootstrap_logger.info(
        "Initializing OpenFGA access control",
        extra={
            "api_url": config.api_url,
            "store_configured": bool(config.store_id),
            "model_configured": bool(config.authorization_model_id),
        },
    )

    client = create_openfga_client(config)
    try:
        active_store_id = await ensure_store(client, config.store_name)
        active_model_id = await ensure_authorization_model(client, relationship_model)
    except FgaAccessError:
        await client.close()
        record_operation("fga.bootstrap", (time.time() - start_time) * 1000, success=False)
        raise
    except Exception as e:
        await client.close()
        duration_ms = (time.time() - start_time) * 1000
        record_operation("fga.bootstrap", duration_ms, success=False)
        bootstrap_logger.critical(
            "OpenFGA bootstrap failed",
            extra={
                "error_type": type(e).__name__,
                "error": str(e),
                "duration_ms": round(duration_ms, 2),
            },
            exc_info=True,
        )
        raise InitializationError(
            f"Failed to provision OpenFGA store or model: {e}",
            api_url=config.api_url,
            store_id=client.get_store_id(),
            context={"error_type": type(e).__name__},
        ) from e

    context = AuthorizationContext(
        authorization_model_id=active_model_id,
        store_id=active_store_id,
    )
    adapter = OpenFgaAdapter(client, context)

    if initial_relations:
        logger.info(f"Seeding {len(initial_relations)} initial relation entries")
        await seed_initial_relations(adapter, initial_relations)

    duration_ms = (time.time() - start_time) * 1000
    record_operation("fga.bootstrap", duration_ms, success=True)
    bootstrap_logger.info(
        "OpenFGA access control initialized",
        extra={
            "store_id": context.store_id,
            "authorization_model_id": context.authorization_model_id,
            "duration_ms": round(duration_ms, 2),
        },
    )
    return adapter

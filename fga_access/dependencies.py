"""
FastAPI Authorization Dependencies

Exposes the shared OpenFgaAdapter to route handlers and guards routes
with relationship checks.

This module is part of FGA_ACCESS.
"""

import logging

from fastapi import Depends, HTTPException, Request, status

from .authz.provider import OpenFgaAdapter

logger = logging.getLogger(__name__)


async def get_access_control(request: Request) -> OpenFgaAdapter:
    """
    FastAPI Dependency: Retrieves the shared OpenFgaAdapter from app.state.
    """
    # Set in the application's lifespan after initialize_openfga()
    adapter = getattr(request.app.state, "access_control", None)
    if not adapter:
        logger.critical("get_access_control: access control not found on app.state!")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authorization engine not initialized.",
        )
    return adapter


async def get_current_subject(request: Request) -> str:
    """
    FastAPI Dependency: The authenticated subject (e.g. ``user:anne``),
    as placed on request.state by the authentication layer.
    """
    subject = getattr(request.state, "subject", None)
    if not subject or not isinstance(subject, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated.",
        )
    return subject


def require_relation(relation: str, object_type: str, path_param: str = "id"):
    """
    Dependency Factory: Requires the current subject to hold ``relation``
    on ``<object_type>:<path_param value>``.

    Denied and indeterminate checks both answer 403; so does an
    unreachable server, since check fails closed.
    """

    async def _check_relation(
        request: Request,
        subject: str = Depends(get_current_subject),
        access_control: OpenFgaAdapter = Depends(get_access_control),
    ) -> str:
        object_id = request.path_params.get(path_param)
        if object_id is None:
            logger.error(f"require_relation: path parameter '{path_param}' missing from route.")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Server configuration error: authorization target not found.",
            )

        obj = f"{object_type}:{object_id}"
        allowed = await access_control.check(subject, relation, obj)

        if allowed is not True:
            logger.warning(
                f"require_relation: Access DENIED for '{subject}' ({relation} on {obj})."
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"You do not have the '{relation}' relation on '{obj}'.",
            )

        logger.debug(f"require_relation: Access GRANTED for '{subject}' ({relation} on {obj}).")
        return subject

    return _check_relation

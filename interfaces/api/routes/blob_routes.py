from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from lagom import Container
from returns.result import Failure

from application.dtos.blob_dtos import BlobResponse
from application.dtos.errors import AppError
from application.use_cases.blob_use_cases import (
    DeleteBlobUseCase,
    GetBlobUseCase,
    PutBlobUseCase,
)
from domain.services.install_script import INSTALL_SCRIPT_FILENAME, render_install_script
from domain.services.request_authorizer import RequestAuthorizer
from domain.value_objects.mirror_source import MirrorSource
from interfaces.api.middleware import handle_use_case_errors
from interfaces.dependencies import get_container

logger = structlog.get_logger()

router = APIRouter(tags=["blobs"])

# Methods routed to the handlers so the authorizer (not the router) rejects
# the ones storage does not support.
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _blob_to_response(blob: BlobResponse) -> Response:
    return Response(content=blob.content, headers=blob.http_headers())


@router.api_route("/", methods=ROUTED_METHODS, include_in_schema=False)
async def install_script(
    container: Annotated[Container, Depends(get_container)],
) -> Response:
    """Serve the bootstrap script for the mirrored repository.

    Served for every method and without authorization.
    """
    script = render_install_script(container[MirrorSource])
    return Response(
        content=script,
        headers={
            "Content-Type": "text/x-shellscript",
            "Content-Disposition": f'attachment; filename="{INSTALL_SCRIPT_FILENAME}"',
        },
    )


@router.api_route("/{key:path}", methods=ROUTED_METHODS, response_model=None)
@handle_use_case_errors
async def handle_blob_request(
    key: str,
    request: Request,
    container: Annotated[Container, Depends(get_container)],
) -> Response:
    """Read, write or delete the blob stored under the request path.

    Returns:
        200 OK: Blob content, or a plain-text confirmation for PUT/DELETE
        403 Forbidden: Write without the shared secret, or unsupported method
        404 Not Found: GET for a key with no blob
        405 Method Not Allowed: Unreachable through the authorizer, kept for completeness
        500 Internal Server Error: Storage backend failure

    """
    method = request.method
    authorizer = container[RequestAuthorizer]

    if not authorizer.is_authorized(method, request.headers):
        logger.info("blob_request_forbidden", method=method, key=key)
        return Failure(AppError("unauthorized", "Forbidden"))

    match method:
        case "GET":
            result = await container[GetBlobUseCase].execute(key)
            return result.map(_blob_to_response)
        case "PUT":
            body = await request.body()
            result = await container[PutBlobUseCase].execute(key, body)
            return result.map(lambda put: PlainTextResponse(put.message))
        case "DELETE":
            result = await container[DeleteBlobUseCase].execute(key)
            return result.map(lambda deleted: PlainTextResponse(deleted.message))
        case _:
            return Failure(AppError("method_not_allowed", "Method Not Allowed"))

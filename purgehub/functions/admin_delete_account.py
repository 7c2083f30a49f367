"""
admin-delete-account: privileged, irreversible account erasure.

Deploy on its own, e.g.:

  uvicorn purgehub.functions.admin_delete_account:app

POST {"userId": "...", "reason": "..."} with "Authorization: Bearer <caller token>".
Success is 200 {"success": true}; every failure is 400 {"error": "<message>"}.
"""

import json
import logging
from typing import Annotated

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from purgehub.core.config import get_settings
from purgehub.core.database import get_db
from purgehub.schemas.deletion import (
    DeleteAccountError,
    DeleteAccountRequest,
    DeleteAccountSuccess,
)
from purgehub.services.account_deletion import delete_account
from purgehub.services.auth_admin import AuthAdminClient, get_auth_admin_client
from purgehub.services.errors import ModerationError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

app = FastAPI(title="admin-delete-account", docs_url=None, redoc_url=None, openapi_url=None)


async def _read_body(request: Request) -> DeleteAccountRequest:
    """Lenient parse: a missing or malformed body yields an empty request (userId check fails later)."""
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return DeleteAccountRequest()
    if not isinstance(data, dict):
        return DeleteAccountRequest()
    try:
        return DeleteAccountRequest.model_validate(data)
    except ValidationError:
        return DeleteAccountRequest()


def _error(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=DeleteAccountError(error=message).model_dump(),
        headers=CORS_HEADERS,
    )


@app.options("/")
def preflight() -> Response:
    """CORS pre-flight: empty 200."""
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post("/")
async def admin_delete_account(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    auth_client: Annotated[AuthAdminClient, Depends(get_auth_admin_client)],
) -> JSONResponse:
    """Run the deletion workflow; any failure short-circuits into a 400 with its message."""
    body = await _read_body(request)
    try:
        target_id = await delete_account(
            db,
            auth_client,
            request.headers.get("Authorization"),
            body,
            get_settings(),
        )
    except ModerationError as e:
        logger.info("Account deletion refused: %s", e.message)
        return _error(e.message)
    except Exception as e:
        logger.exception("Account deletion failed: %s", e)
        return _error(str(e) or type(e).__name__)
    logger.info("Account %s deleted", target_id)
    return JSONResponse(
        status_code=200,
        content=DeleteAccountSuccess().model_dump(),
        headers=CORS_HEADERS,
    )

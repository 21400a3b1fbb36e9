from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from taskbridge.config import get_settings
from taskbridge.models.bridge import BridgeRequest
from taskbridge.models.common import ErrorResponse
from taskbridge.services.bridge import BridgeHandler

router = APIRouter(prefix="/api", tags=["bridge"])

# Every method reaches the handler so it can answer 405 in its own envelope
BRIDGE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_bridge_handler() -> BridgeHandler:
    return BridgeHandler(get_settings().bridge_config())


async def _to_bridge_request(request: Request) -> BridgeRequest:
    return BridgeRequest(
        method=request.method,
        headers={name.lower(): value for name, value in request.headers.items()},
        query=dict(request.query_params),
        body=await request.body(),
    )


@router.api_route("/create-bridge", methods=BRIDGE_METHODS, responses=ERROR_RESPONSES)
async def create_bridge(request: Request, handler: BridgeHandler = Depends(get_bridge_handler)):
    bridge_request = await _to_bridge_request(request)
    response = await run_in_threadpool(handler.handle, bridge_request)
    return JSONResponse(status_code=response.status_code, content=response.content)


@router.api_route("/create-todoist", methods=BRIDGE_METHODS, responses=ERROR_RESPONSES)
async def create_todoist(request: Request, handler: BridgeHandler = Depends(get_bridge_handler)):
    return await create_bridge(request, handler)

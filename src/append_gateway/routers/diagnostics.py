"""
Provider connectivity test and raw pass-through proxy.

Both return the provider reply unmapped. They spend provider credit like a
normal lookup, so both require the API key.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from service_commons.exceptions import ServiceError

from append_gateway.config import get_settings
from append_gateway.core.auth import require_api_key
from append_gateway.core.disconnect import cancel_on_disconnect
from append_gateway.core.state import get_app_state
from append_gateway.logging import get_logger
from append_gateway.schemas import ProbeRequest, ProbeResponse

router = APIRouter(dependencies=[Depends(require_api_key)])


# nosemgrep: no-default-parameter-values (optional request body)
@router.post("/api/test", response_model=ProbeResponse)
async def test_provider(
    request: Request,
    body: ProbeRequest | None = None,
) -> ProbeResponse | JSONResponse:
    """
    Make one provider call and return the raw reply.

    Any failure is reported as HTTP 500 with ``success: false`` and the
    diagnostic details of the underlying error.
    """
    settings = get_settings()
    state = get_app_state()

    ip_address = settings.diagnostics.test_ip_address
    if body is not None and body.ip_address and body.ip_address.strip():
        ip_address = body.ip_address.strip()

    try:
        data = await cancel_on_disconnect(request, state.gateway.probe(ip_address))
    except ServiceError as e:
        get_logger().warning(
            "Provider connectivity test failed",
            extra={"error_code": e.error, "status_code": e.status_code},
        )
        details = dict(e.details)
        details["status_code"] = e.status_code
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": e.error,
                "message": e.message,
                "details": details,
            },
        )

    return ProbeResponse(success=True, data=data)


@router.post("/api/proxy")
async def proxy_to_provider(
    request: Request,
    payload: dict[str, Any] = Body(...),  # nosemgrep: no-default-parameter-values
) -> JSONResponse:
    """
    Forward a caller-built provider payload with server credentials merged in.

    Returns:
        The provider reply, verbatim
    """
    state = get_app_state()
    data = await cancel_on_disconnect(request, state.gateway.forward(payload))
    return JSONResponse(content=data)

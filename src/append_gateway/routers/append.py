"""
Reverse IP append endpoints.

All routes here reach the provider and therefore sit behind the API key
check. Lookups are cancelled if the caller disconnects mid-flight.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from append_gateway.core.auth import require_api_key
from append_gateway.core.disconnect import cancel_on_disconnect
from append_gateway.core.exceptions import InvalidInputError
from append_gateway.core.state import get_app_state
from append_gateway.schemas import BatchResponse, ContactRecord, ErrorResponse, LookupRequest

router = APIRouter(dependencies=[Depends(require_api_key)])

IGNORED_ADDRESSES_HEADER = "X-Ignored-Ip-Addresses"

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    401: {"model": ErrorResponse, "description": "Missing or invalid x-api-key"},
    404: {"model": ErrorResponse, "description": "No contact data for the address"},
    502: {"model": ErrorResponse, "description": "Provider unreachable or failed"},
}


def resolve_visitor_ip(request: Request) -> str | None:
    """Caller address: first X-Forwarded-For hop, else the socket peer."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client is not None:
        return request.client.host
    return None


@router.post(
    "/api/reverse-ip-append",
    response_model=ContactRecord,
    responses=_ERROR_RESPONSES,
)
async def reverse_ip_append(
    body: LookupRequest,
    request: Request,
    response: Response,
) -> ContactRecord:
    """
    Enrich an IP address with contact data.

    Only the first address in ``ipAddresses`` is looked up; the number of
    addresses left out is returned in the X-Ignored-Ip-Addresses header.
    Use the batch endpoint to enrich all of them.
    """
    state = get_app_state()
    ip_addresses = body.resolve_ip_addresses()

    contact = await cancel_on_disconnect(request, state.gateway.lookup(ip_addresses))

    if len(ip_addresses) > 1:
        response.headers[IGNORED_ADDRESSES_HEADER] = str(len(ip_addresses) - 1)
    return contact


@router.post(
    "/api/reverse-ip-append/batch",
    response_model=BatchResponse,
    responses=_ERROR_RESPONSES,
)
async def reverse_ip_append_batch(
    body: LookupRequest,
    request: Request,
) -> BatchResponse:
    """
    Enrich every submitted address, one provider call each, in order.

    Addresses without data are reported as ``not_found`` instead of failing
    the request.
    """
    state = get_app_state()
    results = await cancel_on_disconnect(
        request,
        state.gateway.lookup_batch(body.resolve_ip_addresses()),
    )

    return BatchResponse(
        results=results,
        count=len(results),
        found=sum(1 for item in results if item.status == "found"),
    )


@router.get(
    "/api/visitor-lookup",
    response_model=ContactRecord,
    responses=_ERROR_RESPONSES,
)
async def visitor_lookup(request: Request) -> ContactRecord:
    """Enrich the address the request itself came from."""
    ip_address = resolve_visitor_ip(request)
    if ip_address is None:
        raise InvalidInputError("Could not determine the visitor IP address")

    state = get_app_state()
    return await cancel_on_disconnect(request, state.gateway.lookup([ip_address]))

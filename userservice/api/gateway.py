"""Path-based forwarding of /order/** requests to the order service."""

import logging
from collections.abc import Iterable
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from userservice.core.config import get_settings

logger = logging.getLogger(__name__)
router = APIRouter()

ORDER_PREFIX = "/order"
PROXIED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

# Not forwarded in either direction (RFC 9110 connection-specific fields, plus
# framing headers that httpx/Starlette recompute).
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "host",
        "content-length",
        "content-encoding",
    }
)


def get_order_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for upstream calls; None uses httpx's default network transport."""
    return None


def _forwardable(items: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Header pairs minus hop-by-hop ones; repeated headers are kept as separate pairs."""
    return [(k, v) for k, v in items if k.lower() not in HOP_BY_HOP_HEADERS]


@router.api_route("", methods=PROXIED_METHODS, include_in_schema=False)
@router.api_route("/{path:path}", methods=PROXIED_METHODS, include_in_schema=False)
async def forward_to_order_service(
    request: Request,
    transport: Annotated[httpx.AsyncBaseTransport | None, Depends(get_order_transport)],
) -> Response:
    """Relay the request unchanged (path, query, body, headers) and return the upstream response."""
    settings = get_settings()
    path = request.path_params.get("path", "")
    upstream_path = f"{ORDER_PREFIX}/{path}" if path else ORDER_PREFIX
    body = await request.body()
    try:
        async with httpx.AsyncClient(
            base_url=settings.ORDER_SERVICE_URL,
            timeout=httpx.Timeout(settings.ORDER_SERVICE_TIMEOUT_SEC),
            transport=transport,
        ) as client:
            upstream = await client.request(
                request.method,
                upstream_path,
                params=request.query_params.multi_items(),
                content=body,
                headers=_forwardable(request.headers.items()),
            )
    except httpx.TimeoutException as e:
        logger.warning("Order service timed out", extra={"path": upstream_path})
        raise HTTPException(status_code=504, detail="Order service timed out") from e
    except httpx.HTTPError as e:
        logger.warning(
            "Order service request failed",
            extra={"path": upstream_path, "reason": str(e)[:200]},
        )
        raise HTTPException(status_code=502, detail="Order service unavailable") from e

    logger.debug(
        "Forwarded to order service",
        extra={"path": upstream_path, "status_code": upstream.status_code},
    )
    response = Response(content=upstream.content, status_code=upstream.status_code)
    for key, value in _forwardable(upstream.headers.multi_items()):
        response.headers.append(key, value)
    return response

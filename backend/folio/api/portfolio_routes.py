"""Portfolio allocation API route."""

import asyncio
import json
import logging
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from folio.api.deps import get_valuation_service
from folio.errors import FolioError
from folio.models.portfolio import Allocation
from folio.services.valuation import PortfolioValuationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])

T = TypeVar("T")

DISCONNECT_POLL_INTERVAL = 0.5  # seconds
CLIENT_CLOSED_REQUEST = 499


class ClientDisconnected(Exception):
    pass


async def run_until_disconnect(request: Request, work: Awaitable[T]) -> T:
    """Await ``work``, cancelling it if the client goes away first."""
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_INTERVAL)
            if done:
                return task.result()
            if await request.is_disconnected():
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()


@router.get("", response_model=list[Allocation])
async def get_portfolio(
    request: Request,
    service: PortfolioValuationService = Depends(get_valuation_service),
):
    """Current value held in equity, debt and gold, in that order.

    Errors are reported as a 200 plain-text ``error: ...`` body.
    """
    try:
        allocations = await run_until_disconnect(request, service.allocations())
    except ClientDisconnected:
        logger.info("client disconnected, valuation cancelled")
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    except FolioError as e:
        logger.error(f"error: {e}")
        return PlainTextResponse(f"error: {e}")

    data = [a.model_dump(mode="json") for a in allocations]
    logger.info(f"200 ok: {json.dumps(data)}")
    return JSONResponse(data, headers={"Access-Control-Allow-Origin": "*"})

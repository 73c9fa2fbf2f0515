"""
FastAPI application for the Cartola market proxy.
Serves compact, briefly cacheable views of the Cartola FC public API
plus a heuristic 4-4-2 lineup recommendation.
"""

import asyncio
import logging
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .cartola_client import UpstreamError, cartola_client
from .config import get_settings
from .recommendation import recommend
from .shapers import (
    compact_clubs,
    compact_matches,
    compact_status,
    paginate_athletes,
    parse_id_filter,
    parse_limit,
    parse_offset,
)

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Cartola API",
    description="Compact read-only proxy for Cartola FC market data",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


def cached_response(data: Any) -> JSONResponse:
    """JSON response that clients and CDNs may reuse for a short while."""
    return JSONResponse(
        content=data,
        headers={"Cache-Control": f"public, max-age={settings.cache_max_age}"},
    )


def upstream_failure(message: str, error: Exception) -> JSONResponse:
    """502 payload for a failed upstream call. Never cached."""
    logger.warning("%s: %s", message, error)
    return JSONResponse(
        status_code=502,
        content={"message": message, "error": str(error)},
    )


async def gather_or_cancel(*coros):
    """
    Await coroutines concurrently. On the first failure the others are
    cancelled and awaited before the error is re-raised.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


# API Routes

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return cached_response({"ok": True})


@app.get("/rodada")
async def get_round():
    """Current round number and market state."""
    try:
        data = await cartola_client.get_market_status()
    except UpstreamError as e:
        return upstream_failure("Falha ao buscar /mercado/status", e)
    return cached_response(compact_status(data))


@app.get("/partidas")
async def get_matches():
    """Matches of the current round with scores and venue."""
    try:
        data = await cartola_client.get_matches()
    except UpstreamError as e:
        return upstream_failure("Falha ao buscar /partidas", e)
    return cached_response(compact_matches(data))


@app.get("/clubes")
async def get_clubs():
    """Clubs keyed by id, names only."""
    try:
        data = await cartola_client.get_clubs()
    except UpstreamError as e:
        return upstream_failure("Falha ao buscar /clubes", e)
    return cached_response(compact_clubs(data))


@app.get("/atletas/mercado-resumo")
async def get_market_summary(
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    posicao_id: Optional[str] = None,
    status_id: Optional[str] = None,
):
    """
    Paged, filterable summary of the athlete market.

    Query params (all optional, malformed values fall back to defaults):
    - limit: page size, default 100, clamped to 1..200
    - offset: default 0
    - posicao_id: 1 GOL, 2 LAT, 3 ZAG, 4 MEI, 5 ATA
    - status_id: e.g. 7 for "provável"

    Examples:
    /atletas/mercado-resumo?limit=50
    /atletas/mercado-resumo?posicao_id=5&limit=100
    /atletas/mercado-resumo?posicao_id=1&status_id=7&limit=80
    """
    try:
        data = await cartola_client.get_market_athletes()
    except UpstreamError as e:
        return upstream_failure("Falha ao buscar /atletas/mercado", e)

    return cached_response(
        paginate_athletes(
            data,
            posicao_id=parse_id_filter(posicao_id),
            status_id=parse_id_filter(status_id),
            limit=parse_limit(limit),
            offset=parse_offset(offset),
        )
    )


@app.get("/recomendar")
async def get_recommendation():
    """
    Recommend eleven athletes in a 4-4-2.
    Only the picked athletes are returned, never the full market.
    """
    try:
        market, matches, clubs = await gather_or_cancel(
            cartola_client.get_market_athletes(),
            cartola_client.get_matches(),
            cartola_client.get_clubs(),
        )
    except UpstreamError as e:
        return upstream_failure("Falha ao recomendar", e)
    return cached_response(recommend(market, matches, clubs))


# For running directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)

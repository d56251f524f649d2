from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncEngine

from core.config import settings
from db.database import check_db_connection, get_engine

router = APIRouter(tags=["System"])


@router.get("/health", tags=["Health"])
async def health(engine: Annotated[AsyncEngine, Depends(get_engine)]) -> dict[str, Any]:
    ok = await check_db_connection(engine)
    return {
        "success": ok,
        "status": "ok" if ok else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/", tags=["Root"])
async def root() -> dict[str, Any]:
    return {
        "success": True,
        "message": f"Welcome to {settings.api_title}",
        "version": settings.api_version,
        "health": "/health",
        "timestamp": datetime.now(UTC).isoformat(),
    }

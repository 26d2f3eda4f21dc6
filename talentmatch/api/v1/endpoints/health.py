from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text

from talentmatch.config import MatchingConfig, get_config, get_matching_config
from talentmatch.db.session import get_engine
from talentmatch.utils.logger import logger
from talentmatch.utils.responses import ResponseHelper, success_response

router = APIRouter(tags=["health"])


async def _check_database() -> Dict[str, Any]:
    start_time = datetime.now(timezone.utc)
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        return {"status": "unhealthy", "message": str(e)}

    elapsed = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
    return {"status": "healthy", "response_time_ms": round(elapsed, 2)}


@router.get("/health")
async def health_check(
    request: Request,
    matching_config: MatchingConfig = Depends(get_matching_config),
):
    """Liveness plus a summary of the active matching policy"""
    config = get_config()
    database = await _check_database()

    return success_response(
        data={
            "status": "healthy" if database["status"] == "healthy" else "degraded",
            "version": config.APP_VERSION,
            "environment": config.ENVIRONMENT.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": {"database": database},
            "matching": {
                "weights": matching_config.weights.model_dump(),
                "defaultTopN": matching_config.default_top_n,
                "maxTopN": matching_config.max_top_n,
                "maxConcurrency": matching_config.max_concurrency,
                "chunkSize": matching_config.chunk_size,
                "persistResults": matching_config.persist_results,
            },
        },
        correlation_id=ResponseHelper.get_correlation_id(request),
    )

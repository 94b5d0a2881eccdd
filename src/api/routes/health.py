"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Request

router = APIRouter()

@router.get("/health")
async def health_check(request: Request):
    """Health check - reports healthy only when the document store answers a ping"""
    client = request.app.state.mongo_client

    try:
        await client.admin.command("ping")
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected"
    }

# addonhub/api/v1/health.py
from typing import Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("")
async def get_health() -> Dict:
    """
    Lightweight liveness probe. Returns HTTP 200 when the builder API is reachable.
    """
    return {"description": "Service reachable."}

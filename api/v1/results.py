# api/v1/results.py
from __future__ import annotations
from typing import Any

from fastapi import APIRouter, HTTPException

from services.result_store import results

router = APIRouter()


@router.get("/results/{result_id}", summary="Read back a stored body analysis")
async def fetch_result(result_id: str) -> dict[str, Any]:
    stored = results.get(result_id)
    if stored is None:
        raise HTTPException(status_code=404, detail="Result not found")
    return {**stored, "resultId": result_id}

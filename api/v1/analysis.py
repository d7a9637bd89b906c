# api/v1/analysis.py
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from config import settings
from core.body_classification import NO_CONCERNS, classify, detailed_analysis
from core.nutrition_calc import body_mass_index
from core.prompts import ANALYSIS_SYSTEM, analysis_prompt
from core.recommendation import MAX_RECOMMENDATIONS, generate_recommendations
from scripts.helpers import extract_clean_json
from services import gemini, nyckel
from services.mock_ai import fallback_body_fat, mock_body_fat, simulate_latency
from services.nyckel import BodyFatEstimate, ClassificationError
from services.result_store import results
from api.v1.schemas import AnalysisOut

router = APIRouter()
_LOG = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*[+-]?\d+")
_LEADING_FLOAT = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)")


# ───────────────────────── helpers ──────────────────────────
def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _to_int(raw: str | None) -> int | None:
    """Leading integer of the field, so "180cm" reads as 180."""
    match = _LEADING_INT.match(raw or "")
    return int(match.group(0)) if match else None


def _to_float(raw: str | None) -> float | None:
    match = _LEADING_FLOAT.match(raw or "")
    return float(match.group(0)) if match else None


def _rule_based(inputs: Dict[str, Any], body_fat: float) -> Dict[str, Any]:
    bmi = body_mass_index(inputs["weight"], inputs["height"])
    result = classify(bmi, body_fat, inputs["gender"], inputs["activity"])
    return {
        "bodyType": result.body_type,
        "bodyShape": result.body_shape,
        "healthProblems": result.health_problems,
        "additionalDetails": detailed_analysis(
            inputs["age"], inputs["gender"], inputs["height"], inputs["weight"],
            inputs["activity"], bmi, body_fat,
        ),
        "recommendations": generate_recommendations(
            inputs["age"], inputs["activity"], body_fat, inputs["gender"]
        ),
    }


def _str_list(value: Any) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [str(v) for v in value if v]


def _normalize_ai(data: Dict[str, Any]) -> Dict[str, Any]:
    problems = _str_list(data.get("healthProblems")) or [NO_CONCERNS]
    recs = _str_list(data.get("recommendations")) or []
    return {
        "bodyType": str(data.get("bodyType") or "Mixed"),
        "bodyShape": str(data.get("bodyShape") or "Not determined"),
        "healthProblems": problems,
        "additionalDetails": str(data.get("additionalDetails") or "No additional details available"),
        "recommendations": recs[:MAX_RECOMMENDATIONS],
    }


async def _estimate_body_fat(image: bytes, mime_type: str) -> BodyFatEstimate:
    if settings.use_mock_ai:
        await simulate_latency()
        return mock_body_fat()
    try:
        return await nyckel.classify_body_fat(image, mime_type)
    except ClassificationError as e:
        _LOG.warning("Body fat classifier unavailable, using fallback: %s", e)
        return fallback_body_fat()


async def _narrative(
    inputs: Dict[str, Any], body_fat: float, image: bytes, mime_type: str
) -> Dict[str, Any]:
    if settings.use_mock_ai:
        await simulate_latency()
        return _rule_based(inputs, body_fat)
    try:
        text = await gemini.generate(
            analysis_prompt(inputs, body_fat),
            system=ANALYSIS_SYSTEM,
            image=image,
            mime_type=mime_type,
            max_output_tokens=1000,
        )
    except gemini.GenerationError as e:
        _LOG.warning("Enhanced analysis unavailable, using rules: %s", e)
        return _rule_based(inputs, body_fat)

    data = extract_clean_json(text)
    if not data:
        return _rule_based(inputs, body_fat)
    return _normalize_ai(data)


# ───────────────────────── analyse ──────────────────────────
@router.post(
    "/analyze-enhanced",
    response_model=AnalysisOut,
    status_code=status.HTTP_200_OK,
    summary="Estimate body fat from a photo and describe the body composition",
)
async def analyze_enhanced(
    image: UploadFile | None = File(None),
    age: str | None = Form(None),
    gender: str | None = Form(None),
    height: str | None = Form(None),
    weight: str | None = Form(None),
    activity: str | None = Form(None),
) -> AnalysisOut:
    if image is None:
        raise _bad_request("No valid image file provided")

    age_v, height_v, weight_v = _to_int(age), _to_int(height), _to_float(weight)
    if age_v is None or height_v is None or weight_v is None:
        raise _bad_request("Invalid numeric values provided")
    if not gender or not activity:
        raise _bad_request("Missing required user information")

    if not 13 <= age_v <= 100:
        raise _bad_request("Age must be between 13 and 100")
    if not 100 <= height_v <= 250:
        raise _bad_request("Height must be between 100 and 250 cm")
    if not 30 <= weight_v <= 300:
        raise _bad_request("Weight must be between 30 and 300 kg")

    mime_type = image.content_type or ""
    if not mime_type.startswith("image/"):
        raise _bad_request("Invalid file type. Please upload an image.")
    data = await image.read()
    if len(data) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise _bad_request(f"File too large. Maximum size is {limit_mb}MB.")

    inputs = {
        "age": age_v,
        "gender": gender.strip().lower(),
        "height": height_v,
        "weight": weight_v,
        "activity": activity.strip().lower(),
    }
    _LOG.info("analysis request: %s (image %d bytes)", inputs, len(data))

    estimate = await _estimate_body_fat(data, mime_type)
    narrative = await _narrative(inputs, estimate.percentage, data, mime_type)

    final = {
        "bodyFatPercentage": estimate.percentage,
        "confidence": estimate.confidence,
        **narrative,
    }
    result_id = results.put({
        **final,
        "userInputs": inputs,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
    _LOG.info("analysis %s stored", result_id)
    return AnalysisOut(**final, resultId=result_id)

"""
services/nyckel.py
────────────────────────────────────────────────────────────────────────
Body-fat estimate from a photo via the Nyckel image-classification
function.  Auth is an API key when configured, otherwise an OAuth
client-credentials token cached until it expires.
"""
from __future__ import annotations

import base64
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Dict

import httpx

from config import settings

_LOG = logging.getLogger(__name__)

# label → body-fat %
LABEL_PERCENTAGES: Dict[str, float] = {
    "Very Low": 8, "Low": 15, "Moderate": 22, "High": 30, "Very High": 35,
    "Lean": 12, "Athletic": 10, "Average": 20, "Above Average": 28, "Overweight": 32,
    "5-10%": 7.5, "10-15%": 12.5, "15-20%": 17.5, "20-25%": 22.5,
    "25-30%": 27.5, "30-35%": 32.5, "35%+": 37,
}
MISSING_LABEL_PERCENT = 15.0
UNPARSABLE_LABEL_PERCENT = 18.0
DEFAULT_CONFIDENCE = 0.75

_RANGE = re.compile(r"(\d+(?:\.\d+)?)\s*-\s*(\d+(?:\.\d+)?)")
_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")


class ClassificationError(RuntimeError):
    """The classifier could not be reached or rejected the request."""


@dataclass(frozen=True)
class BodyFatEstimate:
    percentage: float
    confidence: float


# ───────── token cache ──────────────────────────────────────────────
_token: str | None = None
_token_expiry: float = 0.0


async def _access_token(http: httpx.AsyncClient) -> str:
    global _token, _token_expiry
    if settings.nyckel_api_key:
        return settings.nyckel_api_key
    if _token and time.monotonic() < _token_expiry:
        return _token
    if not (settings.nyckel_client_id and settings.nyckel_client_secret):
        raise ClassificationError("No Nyckel API key or client credentials configured")

    r = await http.post(
        settings.nyckel_token_url,
        data={
            "grant_type": "client_credentials",
            "client_id": settings.nyckel_client_id,
            "client_secret": settings.nyckel_client_secret,
        },
    )
    if r.is_error:
        _LOG.warning("Nyckel OAuth failed (%s); using client secret directly", r.status_code)
        return settings.nyckel_client_secret

    try:
        data = r.json()
    except ValueError as e:
        raise ClassificationError("Nyckel token response was not JSON") from e
    if not isinstance(data, dict) or not data.get("access_token"):
        raise ClassificationError("No access token in Nyckel response")
    _token = data["access_token"]
    _token_expiry = time.monotonic() + float(data.get("expires_in") or 3600)
    _LOG.info("Nyckel token refreshed, expires in %ss", data.get("expires_in") or 3600)
    return _token


# ───────── response parsing ─────────────────────────────────────────
def label_to_percentage(label: str | None) -> float:
    if not label:
        return MISSING_LABEL_PERCENT
    if label in LABEL_PERCENTAGES:
        return float(LABEL_PERCENTAGES[label])
    rng = _RANGE.search(label)
    if rng:
        return (float(rng.group(1)) + float(rng.group(2))) / 2
    num = _NUMBER.search(label)
    if num:
        return float(num.group(1))
    return UNPARSABLE_LABEL_PERCENT


def parse_result(payload: Dict[str, Any]) -> BodyFatEstimate:
    confidence = DEFAULT_CONFIDENCE
    for key in ("confidence", "score"):
        value = payload.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            confidence = float(value)
            break
    return BodyFatEstimate(
        percentage=label_to_percentage(payload.get("labelName")),
        confidence=confidence,
    )


# ───────── public entrypoint ────────────────────────────────────────
async def classify_body_fat(image: bytes, mime_type: str) -> BodyFatEstimate:
    data_uri = f"data:{mime_type};base64,{base64.b64encode(image).decode('ascii')}"
    try:
        async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as http:
            token = await _access_token(http)
            r = await http.post(
                settings.nyckel_function_url,
                headers={"Authorization": f"Bearer {token}"},
                json={"data": data_uri},
            )
            r.raise_for_status()
            payload = r.json()
    except httpx.HTTPError as e:
        raise ClassificationError(f"Body fat analysis failed: {e}") from e
    except ValueError as e:
        raise ClassificationError("Nyckel returned a non-JSON body") from e

    if not isinstance(payload, dict):
        raise ClassificationError("Unexpected Nyckel payload")
    _LOG.debug("Nyckel result: %s", payload)
    return parse_result(payload)

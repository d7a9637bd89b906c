"""Stand-ins for the hosted models when `use_mock_ai` is on or a call fails."""

import asyncio
import random

from config import settings
from services.nyckel import BodyFatEstimate

FALLBACK_CONFIDENCE = 0.80


async def simulate_latency() -> None:
    if settings.mock_latency_seconds > 0:
        await asyncio.sleep(settings.mock_latency_seconds)


def mock_body_fat() -> BodyFatEstimate:
    """Plausible estimate (12–30 %) for demo mode."""
    return BodyFatEstimate(
        percentage=round(12 + random.random() * 18, 1),
        confidence=round(0.75 + random.random() * 0.2, 2),
    )


def fallback_body_fat() -> BodyFatEstimate:
    """Estimate (15–30 %) used after the classifier failed."""
    return BodyFatEstimate(
        percentage=round(15 + random.random() * 15, 1),
        confidence=FALLBACK_CONFIDENCE,
    )

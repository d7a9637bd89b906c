from __future__ import annotations
from typing import List

from pydantic import BaseModel


class AnalysisOut(BaseModel):
    bodyFatPercentage: float
    confidence: float
    bodyType: str
    bodyShape: str
    healthProblems: List[str]
    additionalDetails: str
    recommendations: List[str]
    resultId: str

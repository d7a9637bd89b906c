# api/v1/router.py
from fastapi import APIRouter

from . import analysis, meal_plans, results

api_router = APIRouter()

api_router.include_router(analysis.router, tags=["Analysis"])
api_router.include_router(meal_plans.router, tags=["Meal plans"])

# read-back of analyses stored by /analyze-enhanced
api_router.include_router(results.router, tags=["Results"])

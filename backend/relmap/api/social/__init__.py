"""Social API routes."""
from fastapi import APIRouter

from relmap.api.social import routes_insights, routes_people

router = APIRouter()

router.include_router(routes_people.router, prefix="/people", tags=["people"])
router.include_router(routes_insights.router, tags=["insights"])

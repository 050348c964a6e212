"""
API routes for the simulator.
"""

from fastapi import APIRouter

from immosim.api import calculations

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])

"""Main v1 router aggregator"""
from fastapi import APIRouter

from whati8.api.v1 import ledgers

# Create v1 router
api_router = APIRouter()

# Include all v1 routers
api_router.include_router(ledgers.router)

"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter
from datetime import datetime

# Import sub-routers
from app.api.customers import router as customers_router, measurements_router
from app.api.catalog import router as catalog_router
from app.api.orders import router as orders_router, history_router
from app.api.linking import router as linking_router
from app.api.showroom import router as showroom_router

api_router = APIRouter(tags=["API"])

# Include sub-routers
api_router.include_router(customers_router)
api_router.include_router(measurements_router)
api_router.include_router(catalog_router)
api_router.include_router(orders_router)
api_router.include_router(history_router)
api_router.include_router(linking_router)
api_router.include_router(showroom_router)

# ===================== HEALTH & STATUS =====================

@api_router.get("/status")
async def api_status():
    return {"status": "ok", "version": "1.0.0", "timestamp": datetime.now().isoformat()}

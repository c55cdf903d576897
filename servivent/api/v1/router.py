# servivent/api/v1/router.py
from fastapi import APIRouter

from servivent.modules.purchases import purchases_router
from servivent.modules.sales import sales_router
from servivent.modules.pricing import pricing_router


# Crear router principal de la API v1
api_router = APIRouter(prefix="/api/v1")

# ==================== ENDPOINTS TRANSACCIONALES ====================

api_router.include_router(purchases_router)
api_router.include_router(sales_router)
api_router.include_router(pricing_router)

# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": "ServiVENT API v1",
        "status": "active",
        "available_endpoints": {
            "compras": [
                "/api/v1/create-purchase",
                "/api/v1/receive-purchase-stock",
                "/api/v1/registrar-pago-compra",
                "/api/v1/eliminar-pago-compra"
            ],
            "ventas": ["/api/v1/create-sale"],
            "precios": ["/api/v1/update-branch-prices"]
        }
    }

@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "ServiVENT API",
        "modules": {
            "purchases": "active",
            "sales": "active",
            "pricing": "active"
        }
    }

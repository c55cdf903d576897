# servivent/modules/sales/__init__.py
"""
Módulo de Ventas

- create-sale: registro de ventas con descuento atómico de stock

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio y transacciones
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request
"""

from .router import router as sales_router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "sales_router",
    "SalesService",
    "SalesRepository"
]

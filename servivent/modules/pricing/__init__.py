"""
Módulo de Precios por Sucursal

- update-branch-prices: eliminación y upsert de precios por sucursal
"""

from .router import router as pricing_router
from .service import BranchPriceService
from .repository import BranchPriceRepository

__all__ = [
    "pricing_router",
    "BranchPriceService",
    "BranchPriceRepository"
]

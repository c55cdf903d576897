"""
Libro de inventario por sucursal

- costing.py: costo promedio ponderado y conversión de moneda
- repository.py: upsert con costo promedio y descuento condicional de stock
"""

from .costing import weighted_average_cost, to_local_currency
from .repository import InventoryRepository

__all__ = [
    "InventoryRepository",
    "weighted_average_cost",
    "to_local_currency"
]

from pydantic import BaseModel, Field
from typing import List
from enum import Enum

from servivent.modules.purchases.schemas import PaymentMethod

# ==================== ENUMS ====================

class SaleStatus(str, Enum):
    completada = "Completada"

# ==================== REQUEST SCHEMAS ====================

class SaleItemRequest(BaseModel):
    id_producto: int = Field(..., gt=0, strict=True, description="ID del producto")
    cantidad: int = Field(..., gt=0, strict=True, description="Cantidad vendida")
    precio_unitario: float = Field(..., ge=0, strict=True, allow_inf_nan=False, description="Precio unitario")

class SaleCreateRequest(BaseModel):
    id_sucursal: int = Field(..., gt=0, strict=True, description="Sucursal de la venta")
    id_usuario: str = Field(..., min_length=1, description="Usuario que registra la venta")
    monto_total: float = Field(..., strict=True, allow_inf_nan=False, description="Monto total de la venta")
    metodo_pago: PaymentMethod = Field(..., description="Método de pago")
    items: List[SaleItemRequest] = Field(..., min_length=1, description="Items de la venta")

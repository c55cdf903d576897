from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import List, Optional
from datetime import date
from enum import Enum

# ==================== ENUMS ====================

class PurchaseStatus(str, Enum):
    pendiente = "Pendiente"
    confirmado = "Confirmado"
    cancelada = "Cancelada"

class PaymentStatus(str, Enum):
    pago_pendiente = "Pago Pendiente"
    parcialmente_pagado = "Parcialmente Pagado"
    pagado = "Pagado"

class PaymentCondition(str, Enum):
    contado = "Contado"
    credito = "Crédito"

class Currency(str, Enum):
    local = "Bs."
    extranjera = "$"

class PaymentMethod(str, Enum):
    efectivo = "Efectivo"
    transferencia = "Transferencia"
    tarjeta = "Tarjeta de Débito/Crédito"
    qr = "QR"
    otro = "Otro"

# ==================== REQUEST SCHEMAS ====================

class PurchaseItemRequest(BaseModel):
    id_producto: int = Field(..., gt=0, strict=True, description="ID del producto")
    cantidad: int = Field(..., gt=0, strict=True, description="Cantidad comprada")
    costo_unitario: float = Field(..., ge=0, strict=True, allow_inf_nan=False, description="Costo unitario")
    moneda: Currency = Field(Currency.local, description="Moneda del costo unitario")

class PurchaseCreateRequest(BaseModel):
    id_proveedor: str = Field(..., min_length=1, description="ID del proveedor")
    id_sucursal: int = Field(..., gt=0, strict=True, description="Sucursal que recibe la mercadería")
    monto_total: float = Field(..., strict=True, allow_inf_nan=False, description="Monto total declarado")
    estado: PurchaseStatus = Field(PurchaseStatus.pendiente, description="Estado inicial de la compra")
    items: List[PurchaseItemRequest] = Field(..., min_length=1, description="Items de la compra")

    id_usuario: Optional[str] = Field(None, description="Usuario que registra la compra")
    condicion_pago: PaymentCondition = Field(PaymentCondition.contado, description="Condición de pago")
    fecha_vencimiento: Optional[date] = Field(None, description="Vencimiento, obligatorio para crédito")
    tipo_cambio: float = Field(1.0, gt=0, strict=True, allow_inf_nan=False, description="Tipo de cambio para items en $")

    @model_validator(mode="after")
    def validate_credit_due_date(self):
        if self.condicion_pago == PaymentCondition.credito and self.fecha_vencimiento is None:
            raise ValueError("Las compras a crédito requieren fecha_vencimiento")
        return self

class ReceivePurchaseRequest(BaseModel):
    purchase_id: int = Field(..., gt=0, strict=True, description="ID de la compra a recibir")

class RegisterPaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    purchase_id: int = Field(..., alias="purchaseId", gt=0, strict=True)
    amount: float = Field(..., gt=0, strict=True, allow_inf_nan=False, description="Monto del pago")
    payment_date: date = Field(..., alias="paymentDate", description="Fecha del pago")
    method: PaymentMethod = Field(..., description="Método de pago")
    notes: Optional[str] = Field(None, description="Notas adicionales")

class DeletePaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payment_id: int = Field(..., alias="paymentId", gt=0, strict=True)
    purchase_id: int = Field(..., alias="purchaseId", gt=0, strict=True)


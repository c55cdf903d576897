# servivent/modules/purchases/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from servivent.config.database import get_db
from servivent.config.settings import Settings, get_app_settings
from .service import PurchaseService
from .schemas import (
    PurchaseCreateRequest, ReceivePurchaseRequest,
    RegisterPaymentRequest, DeletePaymentRequest
)

router = APIRouter(tags=["Compras"])


def get_purchase_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> PurchaseService:
    return PurchaseService(db, credit_inventory_on_create=settings.credit_inventory_on_purchase_create)


@router.post("/create-purchase")
def create_purchase(
    purchase_data: PurchaseCreateRequest,
    service: PurchaseService = Depends(get_purchase_service)
):
    """
    Registrar una compra con sus detalles

    - Inserta la cabecera y los detalles en una sola transacción
    - Acredita el inventario de la sucursal con costo promedio ponderado
    - Devuelve el ID de la compra creada
    """
    return service.create_purchase(purchase_data)


@router.post("/receive-purchase-stock")
def receive_purchase_stock(
    request_data: ReceivePurchaseRequest,
    service: PurchaseService = Depends(get_purchase_service)
):
    """
    Recibir la mercadería de una compra pendiente

    - Bloquea la compra para evitar recepciones dobles
    - Convierte costos en $ con el tipo de cambio de la compra
    - Cambia el estado a 'Confirmado' (irreversible)
    """
    return service.receive_purchase_stock(request_data.purchase_id)


@router.post("/registrar-pago-compra")
def register_purchase_payment(
    payment_data: RegisterPaymentRequest,
    service: PurchaseService = Depends(get_purchase_service)
):
    """
    Registrar un pago de compra y recalcular su estado de pago
    """
    return service.register_payment(payment_data)


@router.post("/eliminar-pago-compra")
def delete_purchase_payment(
    payment_data: DeletePaymentRequest,
    service: PurchaseService = Depends(get_purchase_service)
):
    """
    Eliminar un pago de compra y recalcular su estado de pago
    """
    return service.delete_payment(payment_data)

import logging
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from servivent.core.exceptions import InvalidStateError, NotFoundError
from servivent.modules.inventory import InventoryRepository, to_local_currency
from servivent.modules.inventory.costing import Number, to_decimal, to_money
from servivent.shared.database.transaction import atomic
from .repository import PurchaseRepository
from .schemas import (
    PurchaseCreateRequest, RegisterPaymentRequest, DeletePaymentRequest,
    PurchaseStatus, PaymentStatus
)

logger = logging.getLogger(__name__)

# Tolerancia para comparar montos pagados contra el total
PAYMENT_TOLERANCE = Decimal("0.001")


def derive_payment_status(total: Number, total_paid: Number) -> PaymentStatus:
    """Estado de pago en función del total recalculado y lo pagado"""
    total = to_decimal(total)
    total_paid = to_decimal(total_paid)

    if total_paid >= total - PAYMENT_TOLERANCE:
        return PaymentStatus.pagado
    if total_paid > 0:
        return PaymentStatus.parcialmente_pagado
    return PaymentStatus.pago_pendiente


class PurchaseService:
    """
    Servicio de compras: creación, recepción de mercadería y pagos
    """

    def __init__(self, db: Session, credit_inventory_on_create: bool = True):
        self.db = db
        self.repository = PurchaseRepository(db)
        self.inventory = InventoryRepository(db)
        self.credit_inventory_on_create = credit_inventory_on_create

    # ==================== CREAR COMPRA ====================

    def create_purchase(self, purchase_data: PurchaseCreateRequest) -> Dict[str, Any]:
        """
        Registrar la compra con sus detalles en una sola transacción.

        Por defecto el inventario de la sucursal se acredita en este momento
        con el costo promedio ponderado; la recepción posterior vuelve a
        acreditarlo (ver ``credit_inventory_on_purchase_create``).
        """
        exchange_rate = to_decimal(purchase_data.tipo_cambio)

        with atomic(self.db, "compra"):
            purchase = self.repository.create_purchase(
                id_proveedor=purchase_data.id_proveedor,
                id_sucursal=purchase_data.id_sucursal,
                id_usuario=purchase_data.id_usuario,
                monto_total=to_decimal(purchase_data.monto_total),
                estado=purchase_data.estado.value,
                condicion_pago=purchase_data.condicion_pago.value,
                fecha_vencimiento=purchase_data.fecha_vencimiento,
                tipo_cambio=exchange_rate
            )

            for item in purchase_data.items:
                self.repository.add_item(
                    purchase_id=purchase.id,
                    product_id=item.id_producto,
                    quantity=item.cantidad,
                    unit_cost=to_decimal(item.costo_unitario),
                    currency=item.moneda.value
                )

                if self.credit_inventory_on_create:
                    self.inventory.merge_batch(
                        product_id=item.id_producto,
                        branch_id=purchase_data.id_sucursal,
                        quantity=item.cantidad,
                        unit_cost=to_local_currency(item.costo_unitario, item.moneda.value, exchange_rate)
                    )

            purchase_id = purchase.id
            folio = purchase.folio

        logger.info(f"Compra {folio} creada en sucursal {purchase_data.id_sucursal} con {len(purchase_data.items)} items")
        return {"success": True, "compraId": purchase_id}

    # ==================== RECIBIR MERCADERÍA ====================

    def receive_purchase_stock(self, purchase_id: int) -> Dict[str, Any]:
        """
        Confirmar una compra pendiente y acreditar su mercadería al inventario.

        La compra se bloquea durante toda la transacción; una segunda recepción
        concurrente espera y luego falla porque la compra ya está confirmada.
        """
        with atomic(self.db, "recepción de compra"):
            purchase = self.repository.lock_purchase(purchase_id)
            if not purchase:
                raise NotFoundError(f"Compra con ID {purchase_id} no encontrada.")

            if purchase.estado != PurchaseStatus.pendiente.value:
                raise InvalidStateError(f"La compra ya está en estado '{purchase.estado}'.")

            branch_id = purchase.id_sucursal
            exchange_rate = purchase.tipo_cambio or 1

            items = self.repository.get_items(purchase_id)
            if not items:
                raise InvalidStateError("La compra no tiene productos para recibir.")

            received = 0
            for item in items:
                if item.cantidad <= 0:
                    continue

                self.inventory.merge_batch(
                    product_id=item.id_producto,
                    branch_id=branch_id,
                    quantity=item.cantidad,
                    unit_cost=to_local_currency(item.costo_unitario, item.moneda, exchange_rate)
                )
                received += 1

            self.repository.set_status(purchase, PurchaseStatus.confirmado.value)

        logger.info(f"Compra {purchase_id} confirmada: {received} items acreditados en sucursal {branch_id}")
        return {"success": True, "message": "Stock actualizado correctamente."}

    # ==================== PAGOS ====================

    def register_payment(self, payment_data: RegisterPaymentRequest) -> Dict[str, Any]:
        """
        Registrar un pago y recalcular total y estado de pago de la compra.

        El total siempre se deriva de los detalles actuales, nunca del monto
        enviado por el cliente.
        """
        purchase_id = payment_data.purchase_id

        with atomic(self.db, "registro de pago"):
            purchase = self._lock_existing_purchase(purchase_id)

            self.repository.add_payment(
                purchase_id=purchase_id,
                amount=to_decimal(payment_data.amount),
                payment_date=payment_data.payment_date,
                method=payment_data.method.value,
                notes=payment_data.notes
            )
            payment_status = self._refresh_payment_status(purchase)

        logger.info(f"Pago de {payment_data.amount} registrado en compra {purchase_id}: {payment_status.value}")
        return {"success": True, "message": "Pago registrado y estado actualizado."}

    def delete_payment(self, payment_data: DeletePaymentRequest) -> Dict[str, Any]:
        """Eliminar un pago y recalcular total y estado de pago de la compra"""
        purchase_id = payment_data.purchase_id

        with atomic(self.db, "eliminación de pago"):
            purchase = self._lock_existing_purchase(purchase_id)

            if not self.repository.delete_payment(purchase_id, payment_data.payment_id):
                raise NotFoundError(
                    f"No se encontró el pago con ID {payment_data.payment_id} para la compra {purchase_id}."
                )
            payment_status = self._refresh_payment_status(purchase)

        logger.info(f"Pago {payment_data.payment_id} eliminado de compra {purchase_id}: {payment_status.value}")
        return {"success": True, "message": "Pago eliminado y estado actualizado."}

    def _lock_existing_purchase(self, purchase_id: int):
        purchase = self.repository.lock_purchase(purchase_id)
        if not purchase:
            raise NotFoundError(f"No se encontró la compra con ID {purchase_id}.")
        return purchase

    def _refresh_payment_status(self, purchase) -> PaymentStatus:
        total, total_paid = self.repository.get_payment_totals(purchase.id)
        # El estado se deriva del mismo total que queda guardado
        total, total_paid = to_money(total), to_money(total_paid)
        payment_status = derive_payment_status(total, total_paid)
        self.repository.set_payment_totals(purchase, payment_status.value, total)
        return payment_status

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from servivent.shared.database.models import Purchase, PurchaseItem, PurchasePayment
from servivent.modules.inventory.costing import FOREIGN_CURRENCY, to_decimal


class PurchaseRepository:
    """
    Repositorio de compras, sus detalles y sus pagos
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== COMPRAS ====================

    def create_purchase(self, **purchase_data) -> Purchase:
        """Insertar la cabecera y obtener el id generado"""
        purchase = Purchase(fecha_compra=datetime.now(timezone.utc), **purchase_data)
        self.db.add(purchase)
        self.db.flush()

        purchase.folio = f"COMPRA-{purchase.id:06d}"
        self.db.flush()
        return purchase

    def lock_purchase(self, purchase_id: int) -> Optional[Purchase]:
        """
        SELECT ... FOR UPDATE sobre la compra.

        El bloqueo se mantiene hasta el fin de la transacción y serializa las
        recepciones y pagos concurrentes de una misma compra.
        """
        return self.db.query(Purchase).filter(
            Purchase.id == purchase_id
        ).with_for_update().populate_existing().first()

    def set_status(self, purchase: Purchase, status: str):
        purchase.estado = status
        self.db.flush()

    def set_payment_totals(self, purchase: Purchase, payment_status: str, total: Decimal):
        purchase.estado_pago = payment_status
        purchase.monto_total = total
        self.db.flush()

    # ==================== DETALLES ====================

    def add_item(self, purchase_id: int, product_id: int, quantity: int,
                 unit_cost: Decimal, currency: str) -> PurchaseItem:
        item = PurchaseItem(
            id_compra=purchase_id,
            id_producto=product_id,
            cantidad=quantity,
            costo_unitario=unit_cost,
            moneda=currency
        )
        self.db.add(item)
        self.db.flush()
        return item

    def get_items(self, purchase_id: int) -> List[PurchaseItem]:
        return self.db.query(PurchaseItem).filter(
            PurchaseItem.id_compra == purchase_id
        ).order_by(PurchaseItem.id).all()

    def calculate_total(self, purchase_id: int) -> Decimal:
        """
        Total de la compra recalculado desde sus detalles.

        Los items en moneda extranjera se convierten con el tipo de cambio de
        la compra.
        """
        line_total = PurchaseItem.cantidad * PurchaseItem.costo_unitario
        total = self.db.query(
            func.coalesce(func.sum(
                case(
                    (PurchaseItem.moneda == FOREIGN_CURRENCY,
                     line_total * func.coalesce(Purchase.tipo_cambio, 1)),
                    else_=line_total
                )
            ), 0)
        ).select_from(Purchase).outerjoin(
            PurchaseItem, PurchaseItem.id_compra == Purchase.id
        ).filter(Purchase.id == purchase_id).scalar()

        return to_decimal(total or 0)

    # ==================== PAGOS ====================

    def add_payment(self, purchase_id: int, amount: Decimal, payment_date: date,
                    method: str, notes: Optional[str]) -> PurchasePayment:
        payment = PurchasePayment(
            id_compra=purchase_id,
            monto=amount,
            fecha_pago=payment_date,
            metodo_pago=method,
            notas=notes,
            created_at=datetime.now(timezone.utc)
        )
        self.db.add(payment)
        self.db.flush()
        return payment

    def delete_payment(self, purchase_id: int, payment_id: int) -> bool:
        deleted = self.db.query(PurchasePayment).filter(
            PurchasePayment.id == payment_id,
            PurchasePayment.id_compra == purchase_id
        ).delete(synchronize_session=False)
        return deleted > 0

    def calculate_total_paid(self, purchase_id: int) -> Decimal:
        total_paid = self.db.query(
            func.coalesce(func.sum(PurchasePayment.monto), 0)
        ).filter(PurchasePayment.id_compra == purchase_id).scalar()

        return to_decimal(total_paid or 0)

    def get_payment_totals(self, purchase_id: int) -> Tuple[Decimal, Decimal]:
        """(total recalculado, total pagado)"""
        return self.calculate_total(purchase_id), self.calculate_total_paid(purchase_id)

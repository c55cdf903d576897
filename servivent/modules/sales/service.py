# servivent/modules/sales/service.py
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from servivent.core.exceptions import InsufficientStockError
from servivent.modules.inventory import InventoryRepository
from servivent.modules.inventory.costing import to_decimal
from servivent.shared.database.transaction import atomic
from .repository import SalesRepository
from .schemas import SaleCreateRequest, SaleStatus

logger = logging.getLogger(__name__)


class SalesService:
    """
    Servicio de registro de ventas
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = SalesRepository(db)
        self.inventory = InventoryRepository(db)

    def create_sale(self, sale_data: SaleCreateRequest) -> Dict[str, Any]:
        """
        Registrar la venta y descontar el stock de la sucursal.

        Cada item se descuenta con un UPDATE condicional (cantidad >= solicitada).
        Si algún item no tiene stock suficiente se revierte toda la venta.
        """
        branch_id = sale_data.id_sucursal

        with atomic(self.db, "venta"):
            sale = self.repository.create_sale(
                branch_id=branch_id,
                user_id=sale_data.id_usuario,
                total_amount=to_decimal(sale_data.monto_total),
                payment_method=sale_data.metodo_pago.value,
                status=SaleStatus.completada.value
            )

            for item in sale_data.items:
                self.repository.add_item(
                    sale_id=sale.id,
                    product_id=item.id_producto,
                    quantity=item.cantidad,
                    unit_price=to_decimal(item.precio_unitario)
                )

                if not self.inventory.decrement_if_available(item.id_producto, branch_id, item.cantidad):
                    # Solo lectura: la transacción se revierte a continuación
                    product_name, available = self.inventory.get_stock_snapshot(item.id_producto, branch_id)
                    raise InsufficientStockError(product_name, available, item.cantidad)

            sale_id = sale.id

        logger.info(f"Venta {sale_id} registrada en sucursal {branch_id} con {len(sale_data.items)} items")
        return {"success": True, "ventaId": sale_id}

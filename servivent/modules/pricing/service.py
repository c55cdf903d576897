import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from servivent.modules.inventory.costing import to_decimal
from servivent.shared.database.transaction import atomic
from .repository import BranchPriceRepository
from .schemas import BranchPricesUpdateRequest

logger = logging.getLogger(__name__)


class BranchPriceService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = BranchPriceRepository(db)

    def update_branch_prices(self, update_data: BranchPricesUpdateRequest) -> Dict[str, Any]:
        """Eliminar y actualizar precios por sucursal de un producto en una sola transacción"""
        product_id = update_data.product_id

        with atomic(self.db, "actualización de precios"):
            deleted = 0
            if update_data.branch_ids_to_delete:
                deleted = self.repository.delete_prices(product_id, update_data.branch_ids_to_delete)

            for record in update_data.records_to_upsert:
                self.repository.upsert_price(
                    product_id=product_id,
                    branch_id=record.id_sucursal,
                    price=to_decimal(record.precio_venta)
                )

        logger.info(
            f"Precios del producto {product_id}: {deleted} eliminados, "
            f"{len(update_data.records_to_upsert)} actualizados"
        )
        return {"success": True, "message": "Precios actualizados correctamente."}

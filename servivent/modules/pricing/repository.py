from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from servivent.shared.database.models import BranchPrice
from servivent.shared.database.upsert import insert_for


class BranchPriceRepository:

    def __init__(self, db: Session):
        self.db = db

    def delete_prices(self, product_id: int, branch_ids: List[int]) -> int:
        return self.db.query(BranchPrice).filter(
            BranchPrice.id_producto == product_id,
            BranchPrice.id_sucursal.in_(branch_ids)
        ).delete(synchronize_session=False)

    def upsert_price(self, product_id: int, branch_id: int, price: Decimal):
        stmt = insert_for(self.db, BranchPrice).values(
            id_producto=product_id,
            id_sucursal=branch_id,
            precio_venta=price
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["id_producto", "id_sucursal"],
            set_={"precio_venta": stmt.excluded.precio_venta}
        )
        self.db.execute(stmt)

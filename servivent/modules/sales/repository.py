from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from servivent.shared.database.models import Sale, SaleItem


class SalesRepository:
    """
    Repositorio de ventas y sus detalles
    """

    def __init__(self, db: Session):
        self.db = db

    def create_sale(self, branch_id: int, user_id: str, total_amount: Decimal,
                    payment_method: str, status: str) -> Sale:
        sale = Sale(
            id_sucursal=branch_id,
            id_usuario=user_id,
            monto_total=total_amount,
            metodo_pago=payment_method,
            estado=status,
            fecha_venta=datetime.now(timezone.utc)
        )
        self.db.add(sale)
        self.db.flush()
        return sale

    def add_item(self, sale_id: int, product_id: int, quantity: int, unit_price: Decimal) -> SaleItem:
        item = SaleItem(
            id_venta=sale_id,
            id_producto=product_id,
            cantidad=quantity,
            precio_unitario=unit_price
        )
        self.db.add(item)
        self.db.flush()
        return item

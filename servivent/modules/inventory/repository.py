from decimal import Decimal
from typing import Tuple

from sqlalchemy import case, literal
from sqlalchemy.orm import Session

from servivent.shared.database.models import Inventory, Product
from servivent.shared.database.upsert import insert_for


class InventoryRepository:
    """
    Libro de inventario por sucursal.

    Todas las escrituras son sentencias únicas que la base de datos ejecuta de
    forma atómica sobre la fila (producto, sucursal); no se lee la cantidad
    para luego escribirla.
    """

    def __init__(self, db: Session):
        self.db = db

    def merge_batch(self, product_id: int, branch_id: int, quantity: int, unit_cost: Decimal):
        """
        Sumar un lote al inventario recalculando el costo promedio ponderado.

        Si la fila no existe se crea con la cantidad y el costo del lote.
        """
        stmt = insert_for(self.db, Inventory).values(
            id_producto=product_id,
            id_sucursal=branch_id,
            cantidad=quantity,
            costo_promedio=unit_cost
        )
        excluded = stmt.excluded
        new_quantity = Inventory.cantidad + excluded.cantidad

        # literal(1.0) fuerza división decimal en SQLite
        weighted_cost = (
            Inventory.cantidad * Inventory.costo_promedio
            + excluded.cantidad * excluded.costo_promedio
        ) / (new_quantity * literal(1.0))

        stmt = stmt.on_conflict_do_update(
            index_elements=["id_producto", "id_sucursal"],
            set_={
                "costo_promedio": case((new_quantity == 0, 0), else_=weighted_cost),
                "cantidad": new_quantity,
            }
        )
        self.db.execute(stmt)

    def decrement_if_available(self, product_id: int, branch_id: int, quantity: int) -> bool:
        """
        Descontar ``quantity`` unidades solo si hay existencias suficientes.

        La verificación y el descuento son un mismo UPDATE condicional, por lo
        que dos ventas concurrentes nunca venden más de lo disponible.
        Devuelve False si ninguna fila cumplió la condición.
        """
        updated = self.db.query(Inventory).filter(
            Inventory.id_producto == product_id,
            Inventory.id_sucursal == branch_id,
            Inventory.cantidad >= quantity
        ).update(
            {Inventory.cantidad: Inventory.cantidad - quantity},
            synchronize_session=False
        )
        return updated > 0

    def get_stock_snapshot(self, product_id: int, branch_id: int) -> Tuple[str, int]:
        """Nombre del producto y cantidad disponible en la sucursal, para mensajes de error"""
        row = self.db.query(Product.nombre, Inventory.cantidad).join(
            Inventory, Inventory.id_producto == Product.id
        ).filter(
            Inventory.id_producto == product_id,
            Inventory.id_sucursal == branch_id
        ).first()

        if row:
            return row.nombre, row.cantidad

        product_name = self.db.query(Product.nombre).filter(Product.id == product_id).scalar()
        return product_name or f"Producto ID {product_id}", 0

# servivent/modules/sales/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from servivent.config.database import get_db
from .service import SalesService
from .schemas import SaleCreateRequest

router = APIRouter(tags=["Ventas"])


@router.post("/create-sale")
def create_sale(
    sale_data: SaleCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar una venta

    - Inserta la venta y sus detalles en una sola transacción
    - Descuenta el stock con verificación atómica de disponibilidad
    - Si falta stock, informa producto, disponible y solicitado
    """
    service = SalesService(db)

    return service.create_sale(sale_data)

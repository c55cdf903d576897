# servivent/modules/pricing/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from servivent.config.database import get_db
from .service import BranchPriceService
from .schemas import BranchPricesUpdateRequest

router = APIRouter(tags=["Precios por sucursal"])


@router.post("/update-branch-prices")
def update_branch_prices(
    update_data: BranchPricesUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Actualizar los precios por sucursal de un producto

    - Elimina los precios de las sucursales indicadas
    - Inserta o actualiza los precios enviados
    """
    service = BranchPriceService(db)

    return service.update_branch_prices(update_data)

from pydantic import BaseModel, Field, ConfigDict, StrictInt
from typing import List


class BranchPriceRecord(BaseModel):
    id_sucursal: int = Field(..., gt=0, strict=True, description="Sucursal del precio")
    precio_venta: float = Field(..., ge=0, strict=True, allow_inf_nan=False, description="Precio de venta en la sucursal")


class BranchPricesUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId", gt=0, strict=True)
    records_to_upsert: List[BranchPriceRecord] = Field(..., alias="recordsToUpsert")
    branch_ids_to_delete: List[StrictInt] = Field(..., alias="branchIdsToDelete")

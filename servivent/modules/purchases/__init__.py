# servivent/modules/purchases/__init__.py
"""
Módulo de Compras

- create-purchase: registro de compras con acreditación de inventario
- receive-purchase-stock: recepción de mercadería (bloqueo pesimista de la compra)
- registrar-pago-compra / eliminar-pago-compra: pagos con recálculo de estado

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio y transacciones
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request
"""

from .router import router as purchases_router
from .service import PurchaseService, PAYMENT_TOLERANCE, derive_payment_status
from .repository import PurchaseRepository

__all__ = [
    "purchases_router",
    "PurchaseService",
    "PurchaseRepository",
    "PAYMENT_TOLERANCE",
    "derive_payment_status"
]

"""
Reglas de costeo del inventario.

El costo promedio ponderado se recalcula con cada lote que entra:

    nuevo_costo = (cant_actual * costo_actual + cant_lote * costo_lote) / (cant_actual + cant_lote)

y vale 0 cuando la cantidad resultante es 0. La base de datos aplica la misma
fórmula dentro del upsert (ver ``InventoryRepository.merge_batch``).
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]

LOCAL_CURRENCY = "Bs."
FOREIGN_CURRENCY = "$"

# Escala de los montos guardados (Numeric(14, 2))
MONEY_QUANTUM = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_money(value: Number) -> Decimal:
    """Redondear un monto a centavos, la misma escala con la que se guarda"""
    return to_decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def weighted_average_cost(
    current_quantity: int,
    current_cost: Number,
    incoming_quantity: int,
    incoming_cost: Number
) -> Decimal:
    total_quantity = current_quantity + incoming_quantity
    if total_quantity == 0:
        return Decimal("0")

    current_value = Decimal(current_quantity) * to_decimal(current_cost)
    incoming_value = Decimal(incoming_quantity) * to_decimal(incoming_cost)
    return (current_value + incoming_value) / Decimal(total_quantity)


def to_local_currency(unit_cost: Number, currency: str, exchange_rate: Number = 1) -> Decimal:
    """Convertir un costo en moneda extranjera usando el tipo de cambio de la compra"""
    cost = to_decimal(unit_cost)
    if currency == FOREIGN_CURRENCY:
        return cost * to_decimal(exchange_rate or 1)
    return cost

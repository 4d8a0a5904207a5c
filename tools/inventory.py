"""
Inventory Tracker
Stock bookkeeping when a dose is confirmed taken
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Tuple

from config import engine_config
from schemas.medicine import Medicine


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockUpdate:
    """Outcome of recording a taken dose"""
    medicine_id: str
    new_stock: int
    low_stock: bool
    recorded: bool  # False when the date was already recorded


def is_low_stock(stock: int, threshold: int = engine_config.LOW_STOCK_THRESHOLD) -> bool:
    return stock <= threshold


def record_taken(
    medicine: Medicine,
    on_date: date,
    threshold: int = engine_config.LOW_STOCK_THRESHOLD
) -> Tuple[Medicine, StockUpdate]:
    """
    Apply a taken dose to a medicine.

    Decrements stock by one, never below zero, and adds on_date to the
    taken dates. A second call for the same date changes nothing, so
    repeated confirmations of one due dose cannot double-decrement.

    Returns:
        The updated medicine (a copy) and the resulting stock update
    """
    if on_date in medicine.taken_dates:
        logger.debug(f"Medicine {medicine.id} already taken on {on_date}")
        return medicine, StockUpdate(
            medicine_id=medicine.id,
            new_stock=medicine.stock,
            low_stock=is_low_stock(medicine.stock, threshold),
            recorded=False
        )

    new_stock = max(0, medicine.stock - 1)
    updated = medicine.model_copy(update={
        "stock": new_stock,
        "taken_dates": medicine.taken_dates | {on_date},
    })

    return updated, StockUpdate(
        medicine_id=medicine.id,
        new_stock=new_stock,
        low_stock=is_low_stock(new_stock, threshold),
        recorded=True
    )

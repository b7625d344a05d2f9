"""
Built-in revenue and bonus formulas, plus the currency rounding used for the
final report. Callers may supply their own formulas with the same signatures.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Callable

from . import settings
from .schemas import Item, Product, SellerStat

RevenueCalculator = Callable[[Item, Product], float]
BonusCalculator = Callable[[int, int, SellerStat], float]

_CENT = Decimal("0.01")


def round_currency(value: float) -> float:
    """
    Rounds to two decimals, half away from zero (2.675 -> 2.68, -2.675 -> -2.68).
    Goes through str(), the shortest round-tripping form of the float (numpy
    scalars included), so binary noise such as 1.005 == 1.00499999... does not
    pull the result down.
    """
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def calculate_simple_revenue(item: Item, product: Product) -> float:
    """Sale price times quantity, minus the line's percentage discount."""
    discount = 1 - item.discount / 100
    return item.sale_price * item.quantity * discount


def calculate_bonus_by_profit(index: int, total: int, seller: SellerStat) -> float:
    """
    Bonus by finishing position: first place earns 15% of profit, second and
    third 10%, last place nothing, everyone else 5%.

    First place is checked before last place, so a lone seller still gets 15%.
    """
    if index == 0:
        rate = settings.BONUS_RATE_FIRST
    elif index in (1, 2):
        rate = settings.BONUS_RATE_RUNNER_UP
    elif index == total - 1:
        rate = settings.BONUS_RATE_LAST
    else:
        rate = settings.BONUS_RATE_DEFAULT
    return seller.profit * rate

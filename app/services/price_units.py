"""
Price Unit Conversion

Ratios are stored per token; editors show a price per block of tokens
(per 1M by default). The display unit is always passed in by the caller.

Rounding to 2 decimals makes the round trip lossy for very small ratios.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Union
import enum

from ..schemas.pricing import ModelConfig, DisplayPriceRow


class PriceUnit(str, enum.Enum):
    PER_MILLION = "per_million"
    PER_THOUSAND = "per_thousand"

    @property
    def tokens(self) -> int:
        return 1_000_000 if self is PriceUnit.PER_MILLION else 1_000


Number = Union[int, float, str, Decimal]


def _round_price(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def to_display_price(ratio: Optional[Number], unit: PriceUnit = PriceUnit.PER_MILLION) -> float:
    """Per-token ratio -> display price, rounded to 2 decimals"""
    if not ratio:
        return 0
    return _round_price(float(ratio) * unit.tokens)


def to_ratio(price: Optional[Number], unit: PriceUnit = PriceUnit.PER_MILLION) -> float:
    """Display price -> per-token ratio. Form input may arrive as a string."""
    if not price:
        return 0
    value = float(price)
    if value == 0:
        return 0
    return value / unit.tokens


def format_display_price(ratio: Optional[Number], unit: PriceUnit = PriceUnit.PER_MILLION) -> str:
    if not ratio:
        return "0"
    return f"{to_display_price(ratio, unit):.2f}"


def display_price_table(
    configs: Optional[Dict[str, ModelConfig]],
    unit: PriceUnit = PriceUnit.PER_MILLION,
) -> List[DisplayPriceRow]:
    """
    Build editor rows from unified configs, sorted by model name.

    Output price is the input price scaled by the completion ratio; it is
    left empty when the entry has no completion ratio.
    """
    rows = []
    for model_name in sorted(configs or {}):
        config = configs[model_name]
        input_price = to_display_price(config.ratio, unit)
        output_price = None
        if config.completion_ratio is not None:
            output_price = to_display_price((config.ratio or 0) * config.completion_ratio, unit)
        rows.append(DisplayPriceRow(
            model=model_name,
            input_price=input_price,
            output_price=output_price,
            max_tokens=config.max_tokens,
        ))
    return rows

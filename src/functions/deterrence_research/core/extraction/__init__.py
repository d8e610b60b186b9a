"""Variable and purchase-event extraction from session records."""

from .variable_extractor import VariableExtractor, VARIABLE_CATALOG
from .purchase_parser import PurchaseEvent, extract_card_id, iter_purchases, PURCHASE_PATTERN

__all__ = [
    "VariableExtractor",
    "VARIABLE_CATALOG",
    "PurchaseEvent",
    "extract_card_id",
    "iter_purchases",
    "PURCHASE_PATTERN",
]

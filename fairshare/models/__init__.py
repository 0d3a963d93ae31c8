"""Pydantic API models and settlement value types for the split tracker."""

from .constants import ROLES, SPLIT_MODES  # re-export
from .domain import MonthComputed, MonthInputs, SplitMode
from .expense import PrivateExpenseIn, PrivateExpenseOut
from .fixed_cost import CategoryOut, FixedItemIn, FixedItemOut
from .month import MonthOut, MonthOverviewOut
from .settlement import SettlementOut, SettlementRequest
from .transfer import TransferIn, TransferOut

__all__ = [
    "ROLES",
    "SPLIT_MODES",
    "MonthComputed",
    "MonthInputs",
    "SplitMode",
    "PrivateExpenseIn",
    "PrivateExpenseOut",
    "CategoryOut",
    "FixedItemIn",
    "FixedItemOut",
    "MonthOut",
    "MonthOverviewOut",
    "SettlementOut",
    "SettlementRequest",
    "TransferIn",
    "TransferOut",
]

"""Link-placement inventory: models and normalization of scraped records."""

from whitehatlink.inventory.models import InventoryItem, InventoryQuery
from whitehatlink.inventory.normalizer import transform_record, transform_records

__all__ = ["InventoryItem", "InventoryQuery", "transform_record", "transform_records"]

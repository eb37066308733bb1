"""Data models for garages, slots and the vehicle catalog."""

from pygarage.models._base import CatalogRecordModel, GarageBaseModel
from pygarage.models.catalog import Brand, CatalogItem
from pygarage.models.garage import Garage, GarageDraft
from pygarage.models.slot import EMPTY_SLOT, SlotSnapshot

__all__ = [
    "Brand",
    "CatalogItem",
    "CatalogRecordModel",
    "EMPTY_SLOT",
    "Garage",
    "GarageBaseModel",
    "GarageDraft",
    "SlotSnapshot",
]

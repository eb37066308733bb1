"""Internal constants shared across the library."""

from __future__ import annotations

GarageId = int | str
"""Garage identifier.  Repositories hand out ints; tests and callers may use strings."""

# Capacity bounds enforced on new garages.
DEFAULT_MIN_CAPACITY = 1
DEFAULT_MAX_CAPACITY = 100

# Separator used by catalog and stored records for feature tags ("BENNY,DRIFT").
FEATURE_SEPARATOR = ","

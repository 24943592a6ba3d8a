"""
GardenGrid Backend — ORM Models
=================================

Model Inventory:
    - garden.py:  Garden (gardens)
    - bed.py:     Bed (garden_beds)
    - plant.py:   CatalogPlant (plants), PlantInBed (plants_in_beds)

Every model must be imported here so `Base.metadata` knows the full schema
for Alembic autogenerate and for `create_all` in the test suite.
"""

from gardengrid.models.garden import Garden
from gardengrid.models.bed import Bed
from gardengrid.models.plant import CatalogPlant, PlantInBed

__all__ = ["Garden", "Bed", "CatalogPlant", "PlantInBed"]

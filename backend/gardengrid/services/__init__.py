# Services package init
"""
GardenGrid Backend — Services Layer
=====================================

What:  Business rules between the routes (HTTP) and the models (persistence).

Service Inventory:
    - GardenService:  garden CRUD and the one-active-garden rule
    - BedService:     bed CRUD and bed placement inside a garden
    - PlantService:   plant placement inside a bed, resize reconciliation
    - CatalogService: plant catalog reads and startup seeding
    - ownership:      owner-scoped garden/bed lookups shared by the above

Services flush but never commit; the caller's session scope owns the
transaction. Grid geometry lives in gardengrid.layout and never touches the
database.
"""

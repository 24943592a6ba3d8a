# Routes package init
"""
GardenGrid Backend — API Routes Package
=========================================

Route Inventory:
    - gardens.py: POST/GET/PUT/DELETE /api/gardens
    - beds.py:    POST/GET/PUT/DELETE /api/beds, GET /api/beds/can-place
    - plants.py:  /api/plants/save-plants, all-plants, can-place, catalog
    - health.py:  GET /health

Routes are thin: read query parameters and body, call a service, return its
response model. Business rules live in the services.
"""

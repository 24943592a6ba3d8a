"""
GardenGrid Backend — Pydantic Schemas
=======================================

What:  Request/response contracts, kept separate from the ORM models so the
       wire format (e.g. the -1/-1 unplaced encoding, camelCase userId) can
       stay stable while the models evolve.
"""

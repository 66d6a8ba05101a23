# Services package init
"""
RootNote Backend — Services Package
===================================

What:  Business logic layer, independent of HTTP.

Services:
    - plant_store.py: PlantStore, CRUD over the `plants` table with
      validation and tagged mutation outcomes
"""

from rootnote.services.plant_store import MutationOutcome, MutationStatus, PlantStore

__all__ = ["MutationOutcome", "MutationStatus", "PlantStore"]

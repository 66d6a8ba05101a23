# Routes package init
"""
RootNote Backend — API Routes Package
=====================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - plants.py:  GET    /api/plants          (list plants)
                  POST   /api/plants          (create plant)
                  GET    /api/plants/{id}     (get one plant)
                  PATCH  /api/plants/{id}     (partial update)
                  DELETE /api/plants/{id}     (delete plant)
    - health.py:  GET    /api/health          (service health check)

Routes stay thin: extract request data, call the PlantStore, shape the
response. Validation rules and SQL live in the store.
"""

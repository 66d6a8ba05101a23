"""
RootNote Backend — FastAPI Dependencies
=======================================

What:  Hands the application's PlantStore to route handlers.
How:   create_app() stores the instance on `app.state.store`; this dependency
       reads it back from the current request. Routes never import a store.
"""

from fastapi import Request

from rootnote.services.plant_store import PlantStore


def get_store(request: Request) -> PlantStore:
    """
    FastAPI dependency returning the store attached to the running app.

    Example usage in a route:
        @router.get("/plants")
        async def list_plants(store: PlantStore = Depends(get_store)):
            return await store.list_plants()
    """
    return request.app.state.store

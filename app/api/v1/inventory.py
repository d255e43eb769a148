from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, status

from app.services.backend_client import BackendClient, get_backend_client

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/items")
async def get_inventory_items(
    search: Optional[str] = None,
    category: Optional[str] = None,
    warehouse: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    client: BackendClient = Depends(get_backend_client),
):
    params = {"search": search, "category": category, "warehouse": warehouse, "page": page, "limit": limit}
    return await client.list_inventory_items(params)


@router.get("/items/{item_id}")
async def get_inventory_item(item_id: str, client: BackendClient = Depends(get_backend_client)):
    return await client.get_inventory_item(item_id)


@router.post("/items", status_code=status.HTTP_201_CREATED)
async def create_inventory_item(payload: Dict[str, Any] = Body(...), client: BackendClient = Depends(get_backend_client)):
    return await client.create_inventory_item(payload)


@router.patch("/items/{item_id}")
async def update_inventory_item(item_id: str, payload: Dict[str, Any] = Body(...), client: BackendClient = Depends(get_backend_client)):
    return await client.update_inventory_item(item_id, payload)


@router.delete("/items/{item_id}")
async def delete_inventory_item(item_id: str, client: BackendClient = Depends(get_backend_client)):
    await client.delete_inventory_item(item_id)
    return {"ok": True}


@router.get("/warehouses")
async def get_warehouses(client: BackendClient = Depends(get_backend_client)):
    return await client.list_warehouses()


@router.get("/suppliers")
async def get_suppliers(search: Optional[str] = None, client: BackendClient = Depends(get_backend_client)):
    return await client.list_suppliers({"search": search})


@router.get("/dashboard")
async def get_inventory_dashboard(client: BackendClient = Depends(get_backend_client)):
    return await client.get_inventory_dashboard_stats()

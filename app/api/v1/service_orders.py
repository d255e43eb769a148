from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, status

from app.services.backend_client import BackendClient, get_backend_client

router = APIRouter(prefix="/service-orders", tags=["service-orders"])


@router.get("")
async def get_service_orders(client: BackendClient = Depends(get_backend_client)):
    return await client.list_service_orders()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_service_order(payload: Dict[str, Any] = Body(...), client: BackendClient = Depends(get_backend_client)):
    return await client.create_service_order(payload)


@router.patch("/{order_id}")
async def update_service_order(order_id: str, payload: Dict[str, Any] = Body(...), client: BackendClient = Depends(get_backend_client)):
    return await client.update_service_order(order_id, payload)


@router.post("/{order_id}/approve")
async def approve_service_order(order_id: str, client: BackendClient = Depends(get_backend_client)):
    return await client.approve_service_order(order_id)


@router.delete("/{order_id}")
async def delete_service_order(order_id: str, client: BackendClient = Depends(get_backend_client)):
    await client.delete_service_order(order_id)
    return {"ok": True}

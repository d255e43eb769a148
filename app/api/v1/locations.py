from fastapi import APIRouter, Depends, Response, status

from app.schemas.location import LocationAggregateStats, LocationCreate, LocationUpdate
from app.services.backend_client import BackendClient, get_backend_client
from app.services.exporters import export_locations_to_csv, locations_export_filename
from app.services.location_stats import build_location_stats

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("")
async def get_locations(client: BackendClient = Depends(get_backend_client)):
    return await client.list_locations()


@router.get("/basic-info")
async def get_locations_basic_info(client: BackendClient = Depends(get_backend_client)):
    return await client.get_locations_basic_info()


@router.get("/stats", response_model=LocationAggregateStats)
async def get_location_stats(client: BackendClient = Depends(get_backend_client)):
    """Stat cards for the locations page, with month-over-month trends."""
    locations = await client.list_locations()
    return build_location_stats(locations if isinstance(locations, list) else None)


@router.get("/export")
async def export_locations(client: BackendClient = Depends(get_backend_client)):
    locations = await client.list_locations() or []
    return Response(
        content=export_locations_to_csv(locations),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{locations_export_filename()}"'},
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_location(payload: LocationCreate, client: BackendClient = Depends(get_backend_client)):
    return await client.create_location(payload.model_dump(by_alias=True))


@router.patch("/{location_id}")
async def update_location(location_id: str, payload: LocationUpdate, client: BackendClient = Depends(get_backend_client)):
    return await client.update_location(location_id, payload.model_dump(by_alias=True, exclude_unset=True))


@router.delete("/{location_id}")
async def delete_location(location_id: str, client: BackendClient = Depends(get_backend_client)):
    await client.delete_location(location_id)
    return {"ok": True}

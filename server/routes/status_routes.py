from fastapi import APIRouter

from kartline.vehicle import PhysicsConfig

from ..config import MAX_ITERATIONS, SERVER_VERSION

router = APIRouter(tags=["status"])


@router.get("/")
async def root():
    return {
        "status": "online",
        "service": "Kartline Server",
        "version": SERVER_VERSION,
    }


@router.get("/api/status")
async def get_status():
    return {
        "status": "online",
        "version": SERVER_VERSION,
        "max_iterations": MAX_ITERATIONS,
        "physics_defaults": PhysicsConfig().to_dict(),
    }

from fastapi import APIRouter

router = APIRouter(tags=["health-v1"])


@router.get("/health")
def health() -> dict:
    return {"status": "healthy"}

from fastapi import APIRouter

from moneymap import __version__

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    return {
        "status": "ok",
        "version": __version__,
    }

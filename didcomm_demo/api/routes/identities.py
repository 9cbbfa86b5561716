"""Identity API routes."""

from fastapi import APIRouter

from ...app import IApplication
from ..schemas import IdentitiesResponse


def create_identities_router(app: IApplication) -> APIRouter:
    """Create identities router."""
    router = APIRouter(prefix="/api", tags=["identities"])

    @router.get("/identities", response_model=IdentitiesResponse)
    async def get_identities() -> dict:
        """Public identity information for Alice and Bob."""
        identities = app.context.identities.identities()
        return {alias: info.to_dict() for alias, info in identities.items()}

    return router

# wrkr/api/dependencies.py
from fastapi import HTTPException, Request, status

from wrkr.core.catalog import Catalogs


def get_catalogs(request: Request) -> Catalogs:
    """Catalogs loaded once by the application lifespan."""
    catalogs = getattr(request.app.state, "catalogs", None)
    if catalogs is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalogs not loaded",
        )
    return catalogs

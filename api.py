"""
HydAuction FastAPI Application

Main entry point for the auction listing API.

Run with:
    uvicorn api:app --port 9090
"""

from hydauction.app import configure_logging, create_app
from hydauction.config import settings

configure_logging(settings)

app = create_app(settings)


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )

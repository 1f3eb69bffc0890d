import os

from fastapi.openapi.utils import get_openapi
from dotenv import load_dotenv
from wellness_app.main import app

# Load environment variables for development
load_dotenv()


def custom_openapi() -> dict:
    """Return OpenAPI schema with project metadata."""
    if app.openapi_schema:
        return app.openapi_schema
    app.openapi_schema = get_openapi(
        title="Wellness Marketplace API",
        version="1.0.0",
        description=(
            "Therapist/business associations and the booking response workflow "
            "for customers, therapists and businesses."
        ),
        routes=app.routes,
    )
    return app.openapi_schema


app.openapi = custom_openapi

if __name__ == "__main__":
    import uvicorn

    workers = int(os.getenv("UVICORN_WORKERS", "1"))
    keepalive = int(os.getenv("UVICORN_KEEPALIVE", "65"))
    uvicorn.run(
        "wellness_app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("UVICORN_RELOAD", "1") == "1",
        workers=workers,
        timeout_keep_alive=keepalive,
    )

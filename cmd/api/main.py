"""
FastAPI Application Entry Point.

REST API server for Product Catalog Service.
"""
import uvicorn
from dotenv import load_dotenv

from config.settings import get_settings
from internal.transport.http.app import create_app
from pkg.logger.logger import setup_logging


# Load environment variables
load_dotenv()

settings = get_settings()

# Setup logging
setup_logging(
    level=settings.log_level,
    json_format=settings.log_format == "json",
    service_name=settings.app_name,
)

app = create_app(settings)


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
    )

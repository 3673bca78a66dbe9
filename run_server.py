import uvicorn

from app.config import settings
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    logger.info("Starting surf rating service on %s:%d", settings.host, settings.port)
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )

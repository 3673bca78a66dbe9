"""FastAPI application setup for Surf Wave Insights."""

from fastapi import FastAPI

from .api import router as api_router
from .config import settings
from utils.logging_utils import setup_logging

setup_logging(level=settings.log_level, job_name=settings.job_name)

app = FastAPI(title="Surf Wave Insights")

# API routes
app.include_router(api_router, prefix="/v1")

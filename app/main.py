import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.database import get_db
from app.core.seed import seed_super_admin
from app.services.appointments import get_business_by_slug

# Register every model with the metadata before anything creates tables
from app.models import business, user, staff, service, appointment, queue_entry  # noqa: F401

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    await seed_super_admin()
    logger.info("SalonQueue API started (%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title="SalonQueue API",
    description="Appointments and walk-in queue for salons",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "service": "salonqueue-api", "version": "0.1.0"}


@app.get("/b/{slug}")
async def business_redirect(slug: str, db: AsyncSession = Depends(get_db)):
    """Short link to a business page. Unknown slugs go home instead of erroring."""
    try:
        business = await get_business_by_slug(db, slug)
    except HTTPException:
        logger.info("Short link for unknown business '%s', redirecting home", slug)
        return RedirectResponse(url="/")
    return RedirectResponse(url=f"/api/v1/public/{business.slug}")

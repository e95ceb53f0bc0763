import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roach_reports.config import settings
from roach_reports.database import create_tables, async_session
from roach_reports.seed import seed_data
from roach_reports.routers.buildings import router as buildings_router
from roach_reports.routers.reports import router as reports_router
from roach_reports.routers.places import router as places_router
from roach_reports.utils.exceptions import register_exception_handlers
from roach_reports.utils.response import success_response

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "roach-reports-api"
VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    if settings.seed_demo_data:
        async with async_session() as session:
            await seed_data(session)
    logger.info("%s %s started", SERVICE_NAME, VERSION)
    yield


app = FastAPI(
    title="Roach Reports API",
    description="Search buildings, view pest-report statistics and submit reports",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(buildings_router)
app.include_router(reports_router)
app.include_router(places_router)


@app.get("/")
async def root():
    return success_response(
        data={
            "service": SERVICE_NAME,
            "available_routes": [
                "GET /buildings/search?q=",
                "GET /buildings/nearby?lat=&lng=&radius=",
                "GET /buildings/{id}",
                "POST /buildings",
                "GET /reports?page=&limit=",
                "POST /reports",
                "POST /reports/{id}/images",
                "GET /places/autocomplete?input=&session_token=",
                "GET /places/details?place_id=&session_token=",
            ],
        },
        message="Roach Reports API",
    )


@app.get("/health")
async def health_check():
    return success_response(data={"service": SERVICE_NAME, "version": VERSION})

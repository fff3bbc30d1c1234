import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import db, errors
from core.log import configure_logging
from core.settings import get_settings
from schools import repository as school_repository
from schools import router as school_router

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process, handed to routes through app.state.
    app.state.db = await db.connect(settings)
    if settings.db_create_schema:
        await school_repository.create_schema(app.state.db)
        logger.info("schema_ready table=schools")
    try:
        yield
    finally:
        await app.state.db.close()
        app.state.db = None


app = FastAPI(title="School Directory API", lifespan=lifespan)

# Allow the local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.install(app)

app.include_router(school_router.router, prefix="/api", tags=["schools"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "school directory api"}

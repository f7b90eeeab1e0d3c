from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from db import Base, engine
from models import models  # noqa: F401  registers ORM tables
from matching.logic.constants import DEFAULT_STRATEGY
from matching.logic.errors import CatalogLoadError
from matching.logic.runner import CatalogHolder
from matching.logic.strategies import get_strategy
from matching.routes import router as matching_router
from profile_routes import router as profile_router

load_dotenv()

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def load_catalog_into(holder: CatalogHolder) -> None:
    """
    Load the institution catalog named by the environment.
    A failed load is logged and kept on the holder; the app keeps serving
    profile endpoints and answers match requests with 503.
    """
    academic_path = os.getenv("ACADEMIC_CSV_PATH")
    demographics_path = os.getenv("DEMOGRAPHICS_CSV_PATH") or None

    if not academic_path:
        logger.error("ACADEMIC_CSV_PATH is not set, running without an institution catalog")
        holder.mark_failed(CatalogLoadError("<unset>", "ACADEMIC_CSV_PATH is not set"))
        return

    try:
        catalog = holder.load(academic_path, demographics_path)
        logger.info(f"✅ Catalog loaded: {len(catalog)} institutions")
    except CatalogLoadError as e:
        logger.error(f"❌ {e}. Match endpoints will return 503.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events"""
    Base.metadata.create_all(bind=engine)

    app.state.match_strategy = get_strategy(os.getenv("MATCH_STRATEGY") or DEFAULT_STRATEGY).name.value
    app.state.catalog_holder = CatalogHolder()
    load_catalog_into(app.state.catalog_holder)

    yield


app = FastAPI(title="School Match API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("FRONTEND_ORIGIN", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(profile_router)
app.include_router(matching_router)


@app.get("/")
def root():
    return {"status": "ok", "service": "school-match"}

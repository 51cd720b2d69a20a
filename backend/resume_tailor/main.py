import logging
import sqlite3
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resume_tailor.config import settings
from resume_tailor.database import init_db
from resume_tailor.routers import auth, resumes
from resume_tailor.services.summarizer_service import SummarizerContext
from resume_tailor.utils.filesystem import ensure_data_dirs

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create data directories and schema, then integrity-check the metadata store
    ensure_data_dirs()
    init_db()
    try:
        conn = sqlite3.connect(str(settings.db_path))
        result = conn.execute("PRAGMA integrity_check").fetchone()
        conn.close()
        if result and result[0] == "ok":
            logger.info("Database integrity check passed.")
        else:
            logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)
    except sqlite3.Error as exc:
        logger.error("Could not run startup integrity check: %s", exc)

    if settings.preload_summarizer:
        try:
            app.state.summarizer.get(settings.summarizer_model)
        except Exception as exc:
            logger.warning("Summarizer preload failed, requests will use the fallback: %s", exc)
    yield


app = FastAPI(
    title="Resume Tailor",
    description="Tailors a resume to a job description and stores the results",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.summarizer = SummarizerContext()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(resumes.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("resume_tailor.main:app", host=settings.host, port=settings.port)

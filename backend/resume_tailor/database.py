import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from resume_tailor.config import settings


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SCHEMA_SQL = """\
-- ============================================================
-- USERS
-- ============================================================
CREATE TABLE IF NOT EXISTS users (
    id         TEXT PRIMARY KEY,
    email      TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

-- ============================================================
-- MAGIC LINKS (one outstanding link per email)
-- ============================================================
CREATE TABLE IF NOT EXISTS login_links (
    email      TEXT PRIMARY KEY,
    token_hash TEXT NOT NULL,
    expires_at REAL NOT NULL
);

-- ============================================================
-- AUTH THROTTLE
-- ============================================================
CREATE TABLE IF NOT EXISTS auth_throttle (
    key             TEXT PRIMARY KEY,
    failed_attempts INTEGER NOT NULL,
    last_failed_at  REAL NOT NULL
);

-- ============================================================
-- JOBS (metadata for stored job descriptions)
-- ============================================================
CREATE TABLE IF NOT EXISTS jobs (
    id                          TEXT PRIMARY KEY,
    user_id                     TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    document_job_description_id TEXT NOT NULL,
    job_title                   TEXT NOT NULL,
    company_name                TEXT NOT NULL,
    created_at                  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_jobs_user ON jobs(user_id);

-- ============================================================
-- RESUME GENERATIONS
-- ============================================================
CREATE TABLE IF NOT EXISTS resume_generations (
    id                           TEXT PRIMARY KEY,
    user_id                      TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    job_id                       TEXT NOT NULL REFERENCES jobs(id) ON DELETE CASCADE,
    document_sample_resume_id    TEXT NOT NULL,
    document_tailored_resume_id  TEXT NOT NULL,
    match_score                  INTEGER NOT NULL DEFAULT 0,
    generation_status            TEXT NOT NULL DEFAULT 'completed'
                                 CHECK(generation_status IN ('pending','completed','failed')),
    created_at                   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_generations_user ON resume_generations(user_id);
CREATE INDEX IF NOT EXISTS idx_generations_job ON resume_generations(job_id);
"""


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    conn.close()

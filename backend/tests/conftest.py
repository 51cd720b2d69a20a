import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from resume_tailor.config import settings
from resume_tailor.database import get_db, init_db
from resume_tailor.dependencies import get_document_store, get_summarizer_context
from resume_tailor.main import app
from resume_tailor.services.auth_service import auth_service
from resume_tailor.services.document_store import DocumentStore
from resume_tailor.services.summarizer_service import SummarizerContext
from resume_tailor.utils.filesystem import ensure_data_dirs


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class FakeSummarizer:
    """Stands in for a transformers summarization pipeline."""

    def __init__(self, output: str | None = None, error: Exception | None = None):
        self.output = output
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    def __call__(self, prompt, **kwargs):
        self.calls.append((prompt, kwargs))
        if self.error:
            raise self.error
        return [{"summary_text": self.output}]


@pytest.fixture
def tmp_data(tmp_path):
    data_path = tmp_path / "TailorData"
    ensure_data_dirs(data_path)
    return data_path


@pytest.fixture
def test_db(tmp_data):
    db_path = tmp_data / "metadata.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()


@pytest.fixture
def store(tmp_data):
    return DocumentStore(tmp_data)


@pytest.fixture
def fake_summarizer():
    return FakeSummarizer(error=RuntimeError("model unavailable"))


@pytest.fixture
def summarizer_context(fake_summarizer):
    return SummarizerContext(loader=lambda model_name: fake_summarizer)


@pytest.fixture
def fresh_auth_service():
    """Reset session state for each test."""
    original = auth_service.__dict__.copy()
    auth_service._sessions = {}
    yield auth_service
    auth_service.__dict__.update(original)


@pytest.fixture
def client(tmp_data, test_db, store, summarizer_context, fresh_auth_service):
    original_data_path = settings.data_path
    settings.data_path = tmp_data
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_summarizer_context] = lambda: summarizer_context
    c = TestClient(app)
    yield c
    settings.data_path = original_data_path


@pytest.fixture
def issue_link(test_db):
    def _issue(email="jane@example.com") -> str:
        db = test_db()
        try:
            token, _link = auth_service.request_magic_link(db, email)
        finally:
            db.close()
        return token
    return _issue


@pytest.fixture
def sign_in(client, issue_link):
    def _sign_in(email="jane@example.com") -> dict:
        token = issue_link(email)
        r = client.post("/api/v1/auth/verify", json={"email": email, "token": token})
        assert r.status_code == 200
        return r.json()
    return _sign_in


@pytest.fixture
def session(sign_in):
    return sign_in()


@pytest.fixture
def auth_headers(session):
    return {"Authorization": f"Bearer {session['token']}"}

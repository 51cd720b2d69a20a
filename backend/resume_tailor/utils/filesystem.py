from pathlib import Path
from resume_tailor.config import settings

COLLECTIONS = ("job_descriptions", "sample_resumes", "tailored_resumes")


def resolve_documents_dir(data_path: Path | None = None) -> Path:
    if data_path is None:
        return settings.documents_dir
    return data_path / "documents"


def ensure_data_dirs(data_path: Path | None = None) -> Path:
    path = data_path or settings.data_path
    path.mkdir(parents=True, exist_ok=True)
    for collection in COLLECTIONS:
        (resolve_documents_dir(data_path) / collection).mkdir(parents=True, exist_ok=True)
    return path


def ensure_collection_dir(collection: str, data_path: Path | None = None) -> Path:
    collection_dir = resolve_documents_dir(data_path) / collection
    collection_dir.mkdir(parents=True, exist_ok=True)
    return collection_dir

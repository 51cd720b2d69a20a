from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "ResumeTailor"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    session_ttl_seconds: int = 3600 * 12
    magic_link_ttl_seconds: int = 900  # 15 minutes
    magic_link_base_url: str = "http://localhost:3000/auth/callback"
    # Cap uploads and pasted text to reduce memory DoS risk.
    max_upload_bytes: int = 5 * 1024 * 1024  # 5 MiB
    max_text_chars: int = 100_000

    summarizer_model: str = "sshleifer/distilbart-cnn-12-6"
    summarizer_label: str = "DistilBART-CNN"
    alternative_summarizer_model: str = "sshleifer/distilbart-xsum-12-6"
    alternative_summarizer_label: str = "DistilBART-Large"
    summarizer_min_length: int = 100
    summarizer_max_length: int = 300
    prompt_job_chars: int = 300
    prompt_resume_chars: int = 800
    preload_summarizer: bool = False

    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_from: str = "no-reply@resume-tailor.local"
    smtp_use_tls: bool = True

    cors_origins: list[str] = [
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ]

    @property
    def db_path(self) -> Path:
        return self.data_path / "metadata.sqlite"

    @property
    def documents_dir(self) -> Path:
        return self.data_path / "documents"

    model_config = {"env_prefix": "TAILOR_"}


settings = Settings()

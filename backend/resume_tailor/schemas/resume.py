from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateResumeRequest(CamelModel):
    job_description: str = ""
    resume_text: str = ""
    use_alternative: bool = False


class GenerateResumeResponse(CamelModel):
    tailored_resume: str
    keywords: list[str]
    improvements: list[str]
    match_score: int
    timestamp: str
    service: str


class SaveResumeRequest(CamelModel):
    job_description: str = ""
    sample_resume: str = ""
    tailored_resume: str = ""
    match_score: int | None = None
    keywords: list[str] | None = None
    improvements: list[str] | None = None


class DocumentIds(CamelModel):
    job_description_id: str
    sample_resume_id: str
    tailored_resume_id: str


class SaveResumeResponse(CamelModel):
    success: bool
    document_ids: DocumentIds
    job_id: str
    message: str


class TailoredResumeSummary(CamelModel):
    id: str
    created_at: str
    match_score: int
    keywords: list[str] = []
    preview: str


class TailoredResumeDetail(CamelModel):
    id: str
    created_at: str
    content: str
    match_score: int
    keywords: list[str] = []
    improvements: list[str] = []
    job_description: str
    sample_resume: str


class ExportRequest(CamelModel):
    tailored_resume: str = ""
    format: str = "pdf"


class ExtractTextResponse(CamelModel):
    filename: str | None
    text: str
    char_count: int

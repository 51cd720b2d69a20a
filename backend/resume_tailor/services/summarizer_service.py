"""
Summarizer-backed tailoring with a rule-based fallback.

The model is tried first. Any load or inference error, and any output that
fails the quality checks, routes the request through the rule-based pipeline
in ``tailoring`` instead. The caller always gets a result.
"""
import logging
import re
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from resume_tailor.config import settings
from resume_tailor.services.errors import ExternalServiceError, OutputQualityError
from resume_tailor.services.tailoring import (
    DISPLAY_KEYWORDS,
    enhance_sections,
    extract_keywords,
    match_score,
    rebuild_resume,
    split_sections,
    tech_keywords,
)

logger = logging.getLogger("app.summarizer")

FALLBACK_LABEL = "Enhanced Original (Fallback)"
REQUIRED_MARKERS = ("PROFESSIONAL", "EXPERIENCE", "SKILLS")
MIN_RAW_CHARS = 50
MIN_CLEAN_CHARS = 100

MODEL_IMPROVEMENTS = (
    "Rewrote the resume around the job description with an AI summarization model",
    "Prioritised experience that matches the role's key requirements",
    "Condensed wording for readability and ATS parsing",
    "Aligned terminology with keywords from the job posting",
)

FALLBACK_IMPROVEMENTS = (
    "Added TypeScript alongside existing JavaScript and React experience",
    "Highlighted modern frontend tooling such as Tailwind CSS where relevant",
    "Organised content into clear, ATS-friendly sections",
    "Moved soft skills into a dedicated Additional Information section",
    "Strengthened the professional summary for frontend roles",
)

_ALLOWED_SYMBOLS = re.escape(".,;:!?()'\"&/%+#-")
_GARBLED_PATTERNS = [
    re.compile(r"[^A-Za-z\s]{3,}"),
    re.compile(r"\S{20,}"),
    re.compile(rf"[^\w\s{_ALLOWED_SYMBOLS}]{{2,}}"),
]
_PRINTABLE = set(string.printable) - set("\x0b\x0c")


@dataclass(frozen=True)
class TailoringResult:
    tailored_text: str
    keywords: tuple[str, ...]
    improvements: tuple[str, ...]
    match_score: int
    service_label: str
    timestamp: str


def _load_pipeline(model_name: str) -> Callable[..., Any]:
    from transformers import pipeline

    return pipeline("summarization", model=model_name)


@dataclass
class SummarizerContext:
    """Holds lazily loaded summarization pipelines, one per model name.

    Created once per process and passed to ``tailor_resume``. Two requests
    racing on the first load may both build a pipeline; the last one wins.
    """

    loader: Callable[[str], Callable[..., Any]] = _load_pipeline
    _handles: dict[str, Callable[..., Any]] = field(default_factory=dict, init=False, repr=False)

    def get(self, model_name: str) -> Callable[..., Any]:
        handle = self._handles.get(model_name)
        if handle is None:
            logger.info("Loading summarization model %s", model_name)
            handle = self.loader(model_name)
            self._handles[model_name] = handle
        return handle

    def is_loaded(self, model_name: str) -> bool:
        return model_name in self._handles


def build_prompt(job_description: str, resume_text: str) -> str:
    job = job_description[: settings.prompt_job_chars]
    resume = resume_text[: settings.prompt_resume_chars]
    return (
        "Rewrite this resume for the job below. Keep the sections "
        "PROFESSIONAL SUMMARY, SKILLS and EXPERIENCE.\n\n"
        f"Job description: {job}\n\nResume: {resume}"
    )


def clean_text(text: str) -> str:
    text = "".join(c for c in text if c in _PRINTABLE)
    text = re.sub(r"[ \t\r]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def is_garbled(text: str) -> bool:
    return any(p.search(text) for p in _GARBLED_PATTERNS)


def validate_output(raw: str | None) -> str:
    """Return the cleaned model output, or raise OutputQualityError."""
    if not raw or len(raw.strip()) < MIN_RAW_CHARS:
        raise OutputQualityError("model output is empty or too short")
    cleaned = clean_text(raw)
    if len(cleaned) < MIN_CLEAN_CHARS:
        raise OutputQualityError(f"cleaned output too short ({len(cleaned)} chars)")
    if is_garbled(cleaned):
        raise OutputQualityError("model output looks garbled")
    if not any(marker in cleaned for marker in REQUIRED_MARKERS):
        raise OutputQualityError("model output has no resume section markers")
    return cleaned


def _summarize(context: SummarizerContext, model_name: str, prompt: str) -> str:
    try:
        summarizer = context.get(model_name)
        output = summarizer(
            prompt,
            max_length=settings.summarizer_max_length,
            min_length=settings.summarizer_min_length,
            do_sample=False,
        )
        return output[0]["summary_text"]
    except Exception as exc:
        raise ExternalServiceError(f"{model_name}: {exc}") from exc


def heuristic_resume(resume_text: str, keywords: list[str]) -> str:
    sections = split_sections(resume_text)
    enhanced = enhance_sections(sections, tech_keywords(keywords))
    return rebuild_resume(enhanced)


def tailor_resume(
    job_description: str,
    resume_text: str,
    context: SummarizerContext,
    use_alternative: bool = False,
) -> TailoringResult:
    keywords = extract_keywords(job_description)
    if use_alternative:
        model_name, label = settings.alternative_summarizer_model, settings.alternative_summarizer_label
    else:
        model_name, label = settings.summarizer_model, settings.summarizer_label

    try:
        raw = _summarize(context, model_name, build_prompt(job_description, resume_text))
        tailored = validate_output(raw)
        improvements = MODEL_IMPROVEMENTS
    except (ExternalServiceError, OutputQualityError) as exc:
        logger.warning("%s failed (%s), using fallback: %s", label, type(exc).__name__, exc)
        tailored = heuristic_resume(resume_text, keywords)
        improvements = FALLBACK_IMPROVEMENTS
        label = FALLBACK_LABEL

    return TailoringResult(
        tailored_text=tailored,
        keywords=tuple(keywords[:DISPLAY_KEYWORDS]),
        improvements=improvements,
        match_score=match_score(keywords, tailored),
        service_label=label,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

"""
Rule-based resume tailoring.
Keyword extraction, section splitting, keyword injection and match scoring.
Fully offline: used on its own as the fallback path when the summarizer fails.
"""
import re
from dataclasses import dataclass, fields, replace

STOPWORDS = {
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "her",
    "was", "one", "our", "out", "has", "have", "had", "his", "how", "its",
    "who", "did", "let", "she", "too", "use", "will", "with", "this", "that",
    "from", "they", "been", "were", "each", "which", "their", "what", "your",
    "when", "would", "there", "into", "about", "more", "must", "also",
}

# Kept for parity with the job-board heuristics this came from. The length
# clause below already admits every token of four or more letters, so only
# "css" and "html" are ever rescued by this list.
DOMAIN_SUBSTRINGS = (
    "react", "javascript", "typescript", "css", "html", "frontend",
    "developer", "experience", "application", "framework", "responsive",
    "design", "tailwind",
)

TECH_SUBSTRINGS = ("react", "typescript", "javascript", "css", "tailwind")

MAX_KEYWORDS = 10
DISPLAY_KEYWORDS = 8

_TOKEN_RE = re.compile(r"\b[a-z]{3,}\b")


def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> list[str]:
    """Return up to ``limit`` capitalized keywords in order of first appearance."""
    seen: list[str] = []
    for token in _TOKEN_RE.findall(text.lower()):
        if token in STOPWORDS:
            continue
        if not (any(s in token for s in DOMAIN_SUBSTRINGS) or len(token) >= 4):
            continue
        if token not in seen:
            seen.append(token)
    return [k[0].upper() + k[1:] for k in seen[:limit]]


def tech_keywords(keywords: list[str]) -> list[str]:
    return [k for k in keywords if any(s in k.lower() for s in TECH_SUBSTRINGS)]


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResumeSections:
    header: str = ""
    summary: str = ""
    skills: str = ""
    experience: str = ""
    education: str = ""
    projects: str = ""
    certifications: str = ""
    additional: str = ""


SECTION_NAMES = tuple(f.name for f in fields(ResumeSections))

# Checked in order; the first title found in a heading line wins.
SECTION_TITLES = (
    ("summary", ("summary",)),
    ("skills", ("skills",)),
    ("experience", ("experience", "work history")),
    ("education", ("education",)),
    ("projects", ("projects",)),
    ("certifications", ("certifications",)),
    ("additional", ("additional",)),
)

SECTION_LABELS = (
    ("summary", "PROFESSIONAL SUMMARY"),
    ("skills", "TECHNICAL SKILLS"),
    ("experience", "PROFESSIONAL EXPERIENCE"),
    ("education", "EDUCATION"),
    ("projects", "PROJECTS"),
    ("certifications", "CERTIFICATIONS"),
    ("additional", "ADDITIONAL INFORMATION"),
)

BULLET_MARKERS = ("•", "-", "*", "▪")
CONTACT_MARKERS = ("@", "linkedin", "github", "phone", "email")
TITLE_MARKERS = ("developer", "engineer")
MAX_HEADING_CHARS = 50

SOFT_SKILL_PATTERNS = [
    re.compile(p)
    for p in (
        r"continuous learner",
        r"team player",
        r"attention to detail",
        r"strong .*(abilities|skills)",
        r"excellent communication",
        r"problem[- ]solving",
        r"self[- ]motivated",
    )
]
SKILLS_NOISE = ("portfolio", "staying updated", "latest technologies")

SKILL_CATEGORY_WORDS = ("programming", "frameworks", "tools", "databases", "design", "languages")


def _is_bullet(line: str) -> bool:
    return line.startswith(BULLET_MARKERS)


def _heading_section(line: str) -> str | None:
    if len(line) > MAX_HEADING_CHARS or _is_bullet(line):
        return None
    lower = line.lower().rstrip(":").strip()
    for section, titles in SECTION_TITLES:
        if any(t in lower for t in titles):
            return section
    return None


def split_sections(text: str) -> ResumeSections:
    """Split free-form resume text into the eight fixed sections in one pass."""
    buckets = {name: "" for name in SECTION_NAMES}
    current = "header"
    header_done = False

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    for line in lines:
        lower = line.lower()

        section = _heading_section(line)
        if section:
            current = section
            header_done = True
            continue

        if _is_bullet(line) and any(p.search(lower) for p in SOFT_SKILL_PATTERNS):
            buckets["additional"] += line + "\n"
            continue

        if current == "skills" and _is_bullet(line) and any(n in lower for n in SKILLS_NOISE):
            buckets["additional"] += line + "\n"
            continue

        if current == "header" and not header_done:
            if (
                not buckets["header"]
                or any(m in lower for m in CONTACT_MARKERS)
                or any(m in lower for m in TITLE_MARKERS)
            ):
                buckets["header"] += line + "\n"
                continue
            header_done = True
            current = "summary"

        buckets[current] += line + "\n"

    return ResumeSections(**buckets)


# ---------------------------------------------------------------------------
# Enhancement
# ---------------------------------------------------------------------------

DEFAULT_SUMMARY = (
    "Results-driven Frontend Developer with hands-on experience building "
    "responsive, accessible web applications using React, TypeScript and "
    "modern JavaScript. Skilled in component-driven design, Tailwind CSS and "
    "translating product requirements into maintainable, well-tested user "
    "interfaces."
)


def _insert_after_first(text: str, anchor: str, addition: str) -> str:
    idx = text.find(anchor)
    if idx == -1:
        return text
    end = idx + len(anchor)
    return text[:end] + addition + text[end:]


def _enhance_summary(summary: str) -> str:
    if not summary.strip():
        return DEFAULT_SUMMARY
    lower = summary.lower()
    if "react" in lower and "typescript" not in lower:
        return re.sub("react", "React and TypeScript", summary, flags=re.IGNORECASE)
    if "javascript" in lower and "react" not in lower:
        return re.sub("javascript", "React, JavaScript", summary, flags=re.IGNORECASE)
    return summary


def _enhance_skills(skills: str, tech: list[str]) -> str:
    if not skills.strip():
        return skills
    lower = skills.lower()
    if "typescript" not in lower:
        skills = _insert_after_first(skills, "JavaScript", ", TypeScript")
    wants_tailwind = any("tailwind" in k.lower() for k in tech)
    if "tailwind" not in lower and wants_tailwind:
        skills = _insert_after_first(skills, "Bootstrap", ", Tailwind CSS")
    return skills


_USING_REACT_RE = re.compile(r"using React\.js(?!, TypeScript| and TypeScript)")


def _enhance_experience(experience: str, tech: list[str]) -> str:
    if not experience.strip() or not any("typescript" in k.lower() for k in tech):
        return experience
    experience = experience.replace(
        "React.js and modern JavaScript", "React.js, TypeScript, and modern JavaScript"
    )
    # Skips phrases already paired with TypeScript.
    return _USING_REACT_RE.sub("using React.js and TypeScript", experience)


def enhance_sections(sections: ResumeSections, tech: list[str]) -> ResumeSections:
    return replace(
        sections,
        summary=_enhance_summary(sections.summary),
        skills=_enhance_skills(sections.skills, tech),
        experience=_enhance_experience(sections.experience, tech),
    )


# ---------------------------------------------------------------------------
# Reconstruction and scoring
# ---------------------------------------------------------------------------

def _clean_skills(skills: str) -> str:
    kept = []
    for line in skills.splitlines():
        if _is_bullet(line.strip()) and not any(w in line.lower() for w in SKILL_CATEGORY_WORDS):
            continue
        kept.append(line)
    return "\n".join(kept)


def rebuild_resume(sections: ResumeSections) -> str:
    """Join sections under uppercase labels; empty sections are left out."""
    blocks = []
    if sections.header.strip():
        blocks.append(sections.header.strip())
    for name, label in SECTION_LABELS:
        body = getattr(sections, name)
        if name == "skills":
            body = _clean_skills(body)
        if body.strip():
            blocks.append(f"{label}\n{body.strip()}")
    return "\n\n".join(blocks)


def match_score(keywords: list[str], text: str) -> int:
    if not keywords:
        return 60
    lower = text.lower()
    matched = sum(1 for k in keywords if k.lower() in lower)
    raw = round(100 * matched / len(keywords))
    return max(50, min(95, raw))

"""
Response normalizer.

Turns the raw text returned by the completion service into a validated
ExtractedCandidateProfile. The model output is untrusted: every field is
type-checked independently, wrong types become null/empty, and every value
is truncated to its storage limit.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

from domain.models import EducationRecord, ExperienceRecord, ExtractedCandidateProfile

logger = logging.getLogger(__name__)

# Storage limits
FIELD_LIMITS: Dict[str, int] = {
    "full_name": 100,
    "email": 254,
    "phone": 20,
    "location": 100,
}
MAX_SKILLS = 50
MAX_SKILL_LENGTH = 100
MAX_EXPERIENCE = 20
MAX_EDUCATION = 10
EXPERIENCE_LIMITS: Dict[str, int] = {
    "title": 200,
    "company": 200,
    "duration": 200,
    "description": 2000,
}
EDUCATION_LIMITS: Dict[str, int] = {
    "degree": 200,
    "institution": 200,
    "year": 50,
}
MAX_RAW_TEXT_LENGTH = 10000

_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\r?\n?(.*?)\r?\n?```$", re.DOTALL)


class MalformedModelOutput(Exception):
    """Exception raised when model output is not a usable JSON object"""
    pass


def extract_json_payload(raw_text: str) -> str:
    """
    Isolate the JSON payload inside a model response.

    Fenced code blocks (with or without a language tag) are unwrapped.
    Otherwise the slice from the first ``{`` to the last ``}`` is returned,
    which tolerates prose the model adds around the object.
    """
    text = (raw_text or "").strip()

    fenced = _FENCE_RE.match(text)
    if fenced:
        return fenced.group(1).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


def parse_model_json(raw_text: str) -> Dict[str, Any]:
    """
    Parse the model response into a dict.

    Raises:
        MalformedModelOutput: If no JSON object can be parsed
    """
    payload = extract_json_payload(raw_text)
    if not payload:
        raise MalformedModelOutput("Model returned an empty response")
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, RecursionError) as e:
        raise MalformedModelOutput(f"Model output is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedModelOutput(
            f"Model output must be a JSON object, got {type(data).__name__}"
        )
    return data


def _string(value: Any, limit: int) -> Optional[str]:
    if not isinstance(value, str):
        return None
    # strip again after cutting so a second pass gives the same value
    value = value.strip()[:limit].strip()
    return value or None


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _skills(value: Any) -> List[str]:
    skills = []
    for item in _list(value):
        skill = _string(item, MAX_SKILL_LENGTH)
        if skill:
            skills.append(skill)
        if len(skills) >= MAX_SKILLS:
            break
    return skills


def _experience(value: Any) -> List[ExperienceRecord]:
    records = []
    for item in _list(value):
        if not isinstance(item, dict):
            continue
        records.append(ExperienceRecord(
            **{key: _string(item.get(key), limit) for key, limit in EXPERIENCE_LIMITS.items()}
        ))
        if len(records) >= MAX_EXPERIENCE:
            break
    return records


def _education(value: Any) -> List[EducationRecord]:
    records = []
    for item in _list(value):
        if not isinstance(item, dict):
            continue
        records.append(EducationRecord(
            **{key: _string(item.get(key), limit) for key, limit in EDUCATION_LIMITS.items()}
        ))
        if len(records) >= MAX_EDUCATION:
            break
    return records


def truncate_raw_text(text: str) -> str:
    return (text or "")[:MAX_RAW_TEXT_LENGTH]


def profile_from_dict(data: Dict[str, Any], raw_text: str = "") -> ExtractedCandidateProfile:
    """Build a profile from an untrusted dict, coercing and truncating every field."""
    return ExtractedCandidateProfile(
        full_name=_string(data.get("full_name"), FIELD_LIMITS["full_name"]),
        email=_string(data.get("email"), FIELD_LIMITS["email"]),
        phone=_string(data.get("phone"), FIELD_LIMITS["phone"]),
        location=_string(data.get("location"), FIELD_LIMITS["location"]),
        skills=_skills(data.get("skills")),
        experience=_experience(data.get("experience")),
        education=_education(data.get("education")),
        raw_text=truncate_raw_text(raw_text),
    )


def normalize_response(raw_text: str, source_text: str = "") -> ExtractedCandidateProfile:
    """
    Parse and validate a completion response.

    Args:
        raw_text: Text returned by the completion service
        source_text: Extracted resume text, stored as the profile's raw text

    Returns:
        Validated ExtractedCandidateProfile

    Raises:
        MalformedModelOutput: If the response is not a JSON object
    """
    data = parse_model_json(raw_text)
    profile = profile_from_dict(data, raw_text=source_text)
    logger.info(
        "Normalized model output: %d skills, %d experience, %d education entries",
        len(profile.skills), len(profile.experience), len(profile.education),
    )
    return profile


def empty_profile(raw_text: str) -> ExtractedCandidateProfile:
    """Profile with null structured fields, used when the model step is skipped or fails."""
    return ExtractedCandidateProfile(raw_text=truncate_raw_text(raw_text))

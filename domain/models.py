"""
Domain models for the resume ingestion service.
Defines the core entities and their behaviors.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import List, Optional, Dict, Any


class ProcessingStatus(str, Enum):
    """Lifecycle status of an uploaded document."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ProcessingStatus.COMPLETED, ProcessingStatus.FAILED)


@dataclass
class UploadedDocument:
    """A resume file uploaded by a user, as tracked by the datastore."""
    id: str
    user_id: str
    file_name: str
    storage_path: str
    file_size: int = 0
    mime_type: Optional[str] = None
    status: ProcessingStatus = ProcessingStatus.PENDING
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    processed_at: Optional[datetime] = None

    def mark_processing(self):
        self.status = ProcessingStatus.PROCESSING
        self.error_message = None

    def mark_completed(self):
        self.status = ProcessingStatus.COMPLETED
        self.processed_at = datetime.now()
        self.error_message = None

    def mark_failed(self, error: str):
        self.status = ProcessingStatus.FAILED
        self.processed_at = datetime.now()
        self.error_message = error


@dataclass
class ExperienceRecord:
    """One entry of a candidate's work history."""
    title: Optional[str] = None
    company: Optional[str] = None
    duration: Optional[str] = None
    description: Optional[str] = None


@dataclass
class EducationRecord:
    """One entry of a candidate's education."""
    degree: Optional[str] = None
    institution: Optional[str] = None
    year: Optional[str] = None


@dataclass
class ExtractedCandidateProfile:
    """Structured candidate data derived from a resume.

    Attributes:
        full_name: Candidate name, if found
        email: Contact email, if found
        phone: Contact phone, if found
        location: Candidate location, if found
        skills: Ordered list of skill strings
        experience: Ordered list of work history entries
        education: Ordered list of education entries
        raw_text: Normalized resume text the profile was derived from
    """
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    experience: List[ExperienceRecord] = field(default_factory=list)
    education: List[EducationRecord] = field(default_factory=list)
    raw_text: str = ""

    @property
    def has_structured_data(self) -> bool:
        """True if the model produced at least one structured field."""
        return bool(
            self.full_name
            or self.email
            or self.phone
            or self.location
            or self.skills
            or self.experience
            or self.education
        )

    def structured_fields(self) -> Dict[str, Any]:
        """Model-derived fields only, in the shape the model was asked for."""
        data = self.to_dict()
        data.pop("raw_text")
        return data

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ParseOutcome:
    """Result of one parse invocation, returned to the caller.

    ``degraded`` marks a document that completed without structured fields
    ("parsed with warnings"), which callers display differently from errors.
    """
    document_id: str
    success: bool
    status: ProcessingStatus
    profile: Optional[ExtractedCandidateProfile] = None
    profile_id: Optional[str] = None
    error_message: Optional[str] = None
    degraded: bool = False
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_id": self.document_id,
            "success": self.success,
            "status": self.status.value,
            "profile": self.profile.to_dict() if self.profile else None,
            "profile_id": self.profile_id,
            "error": self.error_message,
            "degraded": self.degraded,
            "warnings": list(self.warnings),
        }

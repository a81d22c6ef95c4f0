"""Pydantic schemas for QA reports, checklists and their audit records."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class Rating(str, Enum):
    """Overall report rating, best to worst."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class PriorityLevel(str, Enum):
    """User-declared urgency of a report, independent of its rating."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReportStatus(str, Enum):
    """Report lifecycle status. Moves only draft -> completed."""
    DRAFT = "draft"
    COMPLETED = "completed"


# ============================================================================
# Checklist Schemas
# ============================================================================
# Stored checklist JSON keeps camelCase keys (sectionId, issuesFound, ...),
# so these models alias them and must be dumped with by_alias=True.


class ChecklistItem(BaseModel):
    """A single checkbox in a checklist section."""
    id: str
    text: str
    checked: bool = False


class IssuesFound(BaseModel):
    """Free-text notes and image URLs attached to one section."""
    text: str = ""
    images: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.images


class ChecklistSection(BaseModel):
    """A titled group of checklist items.

    ``completed`` is always derived from the items; any incoming value is
    overwritten.
    """
    model_config = ConfigDict(populate_by_name=True)

    section_id: str = Field(alias="sectionId")
    section_title: str = Field(alias="sectionTitle")
    items: list[ChecklistItem] = Field(default_factory=list)
    issues_found: IssuesFound = Field(default_factory=IssuesFound, alias="issuesFound")
    completed: bool = False

    @model_validator(mode="after")
    def _derive_completed(self) -> "ChecklistSection":
        self.completed = all(item.checked for item in self.items)
        return self

    def refresh_completed(self) -> None:
        """Recompute ``completed`` after items were mutated in place."""
        self.completed = all(item.checked for item in self.items)


class ChecklistCategory(BaseModel):
    """Ordered sections under one category heading."""
    category: str
    sections: list[ChecklistSection] = Field(default_factory=list)


class PrioritySummary(BaseModel):
    """User-curated issue lists per priority tier."""
    critical: list[str] = Field(default_factory=list)
    high: list[str] = Field(default_factory=list)
    medium: list[str] = Field(default_factory=list)
    low: list[str] = Field(default_factory=list)


class UncheckedGroup(BaseModel):
    """Unchecked item texts of one section plus that section's issue notes."""
    model_config = ConfigDict(populate_by_name=True)

    category: str
    section: str
    items: list[str]
    issues_found: IssuesFound = Field(alias="issuesFound")


# ============================================================================
# Report Schemas
# ============================================================================


class QAReportCreate(BaseModel):
    """Input for creating a new report."""
    website_name: str = Field(..., description="Website name")
    url: str = Field(..., description="Website URL")
    date_reviewed: date = Field(default_factory=date.today)
    reviewer_name: str = Field(..., description="Reviewer name")
    priority_level: PriorityLevel = PriorityLevel.MEDIUM

    @field_validator("website_name", "reviewer_name")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("url")
    @classmethod
    def _valid_url(cls, value: str) -> str:
        value = value.strip()
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError as e:
            raise ValueError("Valid URL is required") from e
        return value


class QAReport(BaseModel):
    """Full report as stored in ``qa_reports``."""
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    created_by: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    website_name: str
    url: str
    date_reviewed: date
    reviewer_name: str
    priority_level: PriorityLevel = PriorityLevel.MEDIUM
    checklist_data: list[ChecklistCategory] = Field(default_factory=list)
    priority_summary: PrioritySummary = Field(default_factory=PrioritySummary)
    overall_rating: Optional[Rating] = None
    next_steps: list[str] = Field(default_factory=list)
    status: ReportStatus = ReportStatus.DRAFT

    @field_validator("priority_summary", mode="before")
    @classmethod
    def _null_summary(cls, value: Any) -> Any:
        return value if value is not None else {}

    @field_validator("next_steps", mode="before")
    @classmethod
    def _null_steps(cls, value: Any) -> Any:
        return value if value is not None else []


class ChecklistUpdate(BaseModel):
    """Replacement checklist for a report."""
    checklist_data: list[ChecklistCategory]


class PrioritySummaryUpdate(BaseModel):
    """Priority summary change, optionally recorded as a revision."""
    priority_summary: PrioritySummary
    revision_note: Optional[str] = None


class ReportSummary(BaseModel):
    """Progress and rating figures derived from a report."""
    progress: int
    unchecked_count: int
    critical_count: int
    rating: Rating
    explanation: str
    next_steps: list[str]
    unchecked: list[UncheckedGroup]
    derived_in_sync: bool


class ReportDetailResponse(BaseModel):
    """Report plus its derived summary."""
    report: QAReport
    summary: ReportSummary


class ReportListResponse(BaseModel):
    """Response for listing reports."""
    reports: list[QAReport]
    total: int


# ============================================================================
# Audit / Collaboration Schemas
# ============================================================================


class Revision(BaseModel):
    """Append-only snapshot of summary, rating and next steps."""
    id: UUID
    qa_report_id: UUID
    revised_by: UUID
    revised_at: Optional[datetime] = None
    changes: dict[str, Any] = Field(default_factory=dict)
    revision_note: Optional[str] = None


class CommentCreate(BaseModel):
    """Input for posting a comment on a section."""
    section_key: str
    comment_text: str

    @field_validator("section_key", "comment_text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class Comment(BaseModel):
    """Append-only comment keyed by a checklist section."""
    id: UUID
    qa_report_id: UUID
    user_id: UUID
    section_key: str
    comment_text: str
    created_at: Optional[datetime] = None


class Profile(BaseModel):
    """User profile, created lazily on first authenticated access."""
    id: UUID
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None


class ShareLink(BaseModel):
    """Stored grant that lets a token holder read one report."""
    token: str
    qa_report_id: UUID
    created_by: UUID
    created_at: Optional[datetime] = None
    url: Optional[str] = None

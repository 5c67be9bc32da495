"""Domain models for candidates, job postings, pipeline stages and match results."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class JobStatus(str, Enum):
    ACTIVE = "active"
    PENDING_APPROVAL = "pending_approval"
    CLOSED = "closed"
    DRAFT = "draft"
    PAUSED = "paused"


_LEVEL_FLOORS = {
    "trainee": 0,
    "junior": 1,
    "semi-senior": 3,
    "senior": 5,
    "lead": 7,
    "architect": 10,
}


class ExperienceLevel(str, Enum):
    TRAINEE = "trainee"
    JUNIOR = "junior"
    SEMI_SENIOR = "semi-senior"
    SENIOR = "senior"
    LEAD = "lead"
    ARCHITECT = "architect"

    @property
    def floor(self) -> int:
        """Minimum years of experience expected at this level."""
        return _LEVEL_FLOORS[self.value]


@dataclass
class SalaryRange:
    min: float = 0
    max: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["SalaryRange"]:
        if not data:
            return None
        return cls(min=data.get("min") or 0, max=data.get("max"))


@dataclass
class Note:
    author: str
    date: str
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CandidateProfile:
    id: Any
    name: str = ""
    skills: List[str] = field(default_factory=list)
    experience_years: float = 0
    preferred_location: Optional[str] = None
    salary_range: Optional[SalaryRange] = None
    industry: Optional[str] = None
    stage: Optional[str] = None
    notes: List[Note] = field(default_factory=list)
    job_id: Any = None
    applied_date: Optional[str] = None
    stage_updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "skills": list(self.skills),
            "experience_years": self.experience_years,
            "preferred_location": self.preferred_location,
            "salary_range": self.salary_range.to_dict() if self.salary_range else None,
            "industry": self.industry,
            "stage": self.stage,
            "notes": [n.to_dict() for n in self.notes],
            "job_id": self.job_id,
            "applied_date": self.applied_date,
            "stage_updated_at": self.stage_updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CandidateProfile":
        """Build from a stored (snake_case, already validated) record."""
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            skills=list(data.get("skills") or []),
            experience_years=data.get("experience_years") or 0,
            preferred_location=data.get("preferred_location"),
            salary_range=SalaryRange.from_dict(data.get("salary_range")),
            industry=data.get("industry"),
            stage=data.get("stage"),
            notes=[Note(**n) for n in data.get("notes") or []],
            job_id=data.get("job_id"),
            applied_date=data.get("applied_date"),
            stage_updated_at=data.get("stage_updated_at"),
        )


@dataclass
class JobPosting:
    id: Any
    title: str = ""
    required_skills: List[str] = field(default_factory=list)
    experience_level: Optional[str] = None
    location: Optional[str] = None
    salary_range: Optional[SalaryRange] = None
    industry: Optional[str] = None
    status: JobStatus = JobStatus.ACTIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "required_skills": list(self.required_skills),
            "experience_level": self.experience_level,
            "location": self.location,
            "salary_range": self.salary_range.to_dict() if self.salary_range else None,
            "industry": self.industry,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class PipelineStage:
    id: str
    name: str
    order: int
    color: str = "secondary"
    description: str = ""
    terminal: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineStage":
        return cls(
            id=data["id"],
            name=data.get("name") or data["id"],
            order=data["order"],
            color=data.get("color") or "secondary",
            description=data.get("description") or "",
            terminal=bool(data.get("terminal", False)),
        )


@dataclass
class MatchFactors:
    skills_match: float
    experience_match: float
    location_match: float
    salary_match: float
    industry_match: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class Recommendation:
    type: str
    message: str
    priority: str
    action: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class MatchResult:
    score: int
    factors: MatchFactors
    recommendations: List[Recommendation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "factors": self.factors.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass
class SkillGap:
    skill: str
    priority: str
    estimated_learning_time: str
    resources: Dict[str, List[str]]


@dataclass
class SkillGapAnalysis:
    strengths: List[str] = field(default_factory=list)
    gaps: List[str] = field(default_factory=list)
    recommendations: List[SkillGap] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StageChange:
    candidate_id: Any
    old_stage: Optional[str]
    new_stage: str
    changed_at: str


@dataclass
class Notification:
    level: str
    message: str

"""
Demo data: a default job-seeker profile, sample candidates and postings.

Used by ``catalysthr seed`` to populate an empty store, and as the profile
``score``/``rank`` fall back to when no candidate file is given.
"""

import copy
from typing import Any, Dict, List, Optional

from .logger import StructuredLogger
from .models import CandidateProfile
from .normalize import normalize_candidate, record_key
from .pipeline import PipelineEngine
from .storage import RecordStore

JOBS = "jobs"

DEFAULT_PROFILE = {
    "id": "me",
    "name": "Demo Profile",
    "skills": ["JavaScript", "HTML5", "CSS3"],
    "experience_years": 1,
    "preferred_location": "Colombia",
    "salary_range": {"min": 2000000, "max": 6000000},
    "industry": "technology",
}

SAMPLE_JOBS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "title": "Frontend Developer (React)",
        "required_skills": ["React", "JavaScript", "CSS", "TypeScript"],
        "experience_level": "semi-senior",
        "location": "Bogotá, Colombia",
        "salary_range": {"min": 4000000, "max": 6000000},
        "industry": "technology",
        "status": "active",
    },
    {
        "id": 2,
        "title": "Backend Developer (Node.js)",
        "required_skills": ["Node.js", "Express", "MongoDB", "Docker"],
        "experience_level": "senior",
        "location": "Medellín, Colombia",
        "salary_range": {"min": 6000000, "max": 9000000},
        "industry": "technology",
        "status": "active",
    },
    {
        "id": 3,
        "title": "UX/UI Designer",
        "required_skills": ["Figma", "Prototyping", "Adobe XD"],
        "experience_level": "semi-senior",
        "location": "Remote",
        "salary_range": {"min": 3500000, "max": 5500000},
        "industry": "design",
        "status": "active",
    },
    {
        "id": 4,
        "title": "DevOps Engineer",
        "required_skills": ["Docker", "Kubernetes", "AWS", "Terraform"],
        "experience_level": "senior",
        "location": "Bogotá, Colombia",
        "salary_range": {"min": 7000000, "max": 10000000},
        "industry": "technology",
        "status": "paused",
    },
    {
        "id": 5,
        "title": "Data Scientist",
        "required_skills": ["Python", "TensorFlow", "SQL", "Pandas"],
        "experience_level": "semi-senior",
        "location": "Cali, Colombia",
        "salary_range": {"min": 5000000, "max": 8000000},
        "industry": "fintech",
        "status": "active",
    },
]

# Notes newest-first.
SAMPLE_CANDIDATES: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Ana María González",
        "job_id": 1,
        "stage": "new",
        "experience_years": 3,
        "skills": ["React", "JavaScript", "CSS", "HTML"],
        "preferred_location": "Bogotá",
        "applied_date": "2024-01-15",
        "notes": [],
    },
    {
        "id": 2,
        "name": "Carlos Eduardo Ruiz",
        "job_id": 2,
        "stage": "screening",
        "experience_years": 5,
        "skills": ["Node.js", "Express", "MongoDB", "AWS"],
        "applied_date": "2024-01-14",
        "notes": [
            {"date": "2024-01-16", "author": "HR", "text": "Very promising profile, solid experience"},
        ],
    },
    {
        "id": 3,
        "name": "María Isabella Fernández",
        "job_id": 3,
        "stage": "interview",
        "experience_years": 4,
        "skills": ["Figma", "Adobe XD", "Sketch", "Prototyping"],
        "applied_date": "2024-01-12",
        "notes": [
            {"date": "2024-01-16", "author": "Manager", "text": "Schedule technical interview"},
            {"date": "2024-01-14", "author": "HR", "text": "Excellent portfolio"},
        ],
    },
    {
        "id": 4,
        "name": "Luis Fernando Torres",
        "job_id": 4,
        "stage": "technical",
        "experience_years": 6,
        "skills": ["Docker", "Kubernetes", "AWS", "Terraform"],
        "applied_date": "2024-01-10",
        "notes": [
            {"date": "2024-01-15", "author": "Tech Lead", "text": "Passed first technical interview"},
            {"date": "2024-01-12", "author": "HR", "text": "Senior candidate with relevant experience"},
        ],
    },
    {
        "id": 5,
        "name": "Sofia Alejandra Vargas",
        "job_id": 5,
        "stage": "offer",
        "experience_years": 4,
        "skills": ["Python", "TensorFlow", "SQL", "Power BI"],
        "salary_range": {"min": 4500000, "max": 5000000},
        "applied_date": "2024-01-08",
        "notes": [
            {"date": "2024-01-17", "author": "Manager", "text": "Approve salary offer"},
            {"date": "2024-01-12", "author": "Data Lead", "text": "Excellent technical assessment"},
            {"date": "2024-01-10", "author": "HR", "text": "Exceptional profile"},
        ],
    },
]


def default_profile() -> CandidateProfile:
    return normalize_candidate(copy.deepcopy(DEFAULT_PROFILE))


def sample_jobs() -> List[Dict[str, Any]]:
    return copy.deepcopy(SAMPLE_JOBS)


def seed_store(store: RecordStore, logger: Optional[StructuredLogger] = None) -> Dict[str, int]:
    """
    Load the sample candidates and postings into a store.

    Candidates already present (by id) are left untouched, so seeding twice
    is harmless.

    Returns:
        dict with counts of candidates and jobs written
    """
    engine = PipelineEngine(store, logger=logger)
    existing = {record_key(c.id) for c in engine.candidates()}

    added = 0
    for record in SAMPLE_CANDIDATES:
        if record_key(record["id"]) in existing:
            continue
        engine.add_candidate(copy.deepcopy(record))
        added += 1

    jobs = 0
    for job in SAMPLE_JOBS:
        if store.get(JOBS, record_key(job["id"])) is None:
            store.put(JOBS, record_key(job["id"]), copy.deepcopy(job))
            jobs += 1

    engine.logger.info("Store seeded", candidates=added, jobs=jobs)
    return {"candidates": added, "jobs": jobs}

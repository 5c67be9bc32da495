"""
Candidate/job compatibility scoring.

A match score is a weighted sum of five independent sub-scores in [0, 1]:

    skills      0.40
    experience  0.25
    location    0.15
    salary      0.10
    industry    0.10

scaled to 0-100 and rounded half-up. Missing inputs never raise; each
sub-score has a neutral default for the data it cannot see, because demo
and imported records are frequently incomplete.

Everything here is a pure function of its arguments.
"""

import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .models import (
    CandidateProfile,
    JobPosting,
    JobStatus,
    MatchFactors,
    MatchResult,
    Recommendation,
    SalaryRange,
    SkillGap,
    SkillGapAnalysis,
)
from .normalize import normalize_candidate, normalize_job
from .skills import (
    COUNTRY_TOKENS,
    RELATED_INDUSTRIES,
    REMOTE_TOKENS,
    experience_floor,
    is_related_skill,
    learning_time,
    skill_priority,
    skill_resources,
)

MATCH_WEIGHTS = {
    "skills_match": 0.40,
    "experience_match": 0.25,
    "location_match": 0.15,
    "salary_match": 0.10,
    "industry_match": 0.10,
}

RELATED_SKILL_CREDIT = 0.3
OVERQUALIFIED_MARGIN = 2
RECOMMENDED_SKILLS_SHOWN = 3

CandidateLike = Union[CandidateProfile, Dict[str, Any]]
JobLike = Union[JobPosting, Dict[str, Any]]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def skills_match(required: Sequence[str], candidate_skills: Sequence[str]) -> float:
    """
    Fraction of required skills the candidate has, with partial credit for
    related skills.

    An empty requirement list scores 0.7 even when the candidate also has no
    skills; that check runs first.
    """
    if not required:
        return 0.7
    if not candidate_skills:
        return 0.1

    owned = {s.lower() for s in candidate_skills}
    exact = 0
    related = 0
    for skill in required:
        if skill.lower() in owned:
            exact += 1
        elif is_related_skill(skill, candidate_skills):
            related += 1

    total = len(required)
    return min(1.0, exact / total + RELATED_SKILL_CREDIT * related / total)


def experience_match(level: Optional[str], years: float) -> float:
    floor = experience_floor(level)
    if years >= floor:
        # slight penalty for overqualification
        return 1.0 if years <= floor + OVERQUALIFIED_MARGIN else 0.8
    gap = floor - years
    return max(0.1, 1 - 0.2 * gap)


def location_match(job_location: Optional[str], preferred_location: Optional[str]) -> float:
    if not job_location or not preferred_location:
        return 0.5

    job_loc = job_location.lower()
    pref_loc = preferred_location.lower()

    if job_loc in pref_loc or pref_loc in job_loc:
        return 1.0
    if any(t in job_loc or t in pref_loc for t in REMOTE_TOKENS):
        return 1.0
    if any(t in job_loc and t in pref_loc for t in COUNTRY_TOKENS):
        return 0.8
    return 0.3


def salary_match(job_range: Optional[SalaryRange], candidate_range: Optional[SalaryRange]) -> float:
    """
    Share of the candidate's desired range covered by the job's range.

    The job's max defaults to 1.3x its min; the candidate's max defaults to
    unbounded, which makes any finite overlap worth 0.
    """
    if job_range is None or candidate_range is None:
        return 0.7

    job_min = job_range.min or 0
    job_max = job_range.max or job_min * 1.3
    cand_min = candidate_range.min or 0
    cand_max = candidate_range.max or math.inf

    start = max(job_min, cand_min)
    end = min(job_max, cand_max)
    if end > start:
        return min(1.0, (end - start) / (cand_max - cand_min))
    return 0.1


def industry_match(job_industry: Optional[str], candidate_industry: Optional[str]) -> float:
    if not job_industry or not candidate_industry:
        return 0.7

    job_ind = job_industry.lower()
    cand_ind = candidate_industry.lower()
    if job_ind == cand_ind:
        return 1.0
    return 0.8 if job_ind in RELATED_INDUSTRIES.get(cand_ind, []) else 0.4


def find_missing_skills(required: Iterable[str], candidate_skills: Sequence[str]) -> List[str]:
    """Required skills the candidate neither has nor has a related skill for."""
    owned = {s.lower() for s in candidate_skills}
    return [
        skill for skill in required
        if skill.lower() not in owned and not is_related_skill(skill, candidate_skills)
    ]


def compute_factors(candidate: CandidateProfile, job: JobPosting) -> MatchFactors:
    return MatchFactors(
        skills_match=skills_match(job.required_skills, candidate.skills),
        experience_match=experience_match(job.experience_level, candidate.experience_years),
        location_match=location_match(job.location, candidate.preferred_location),
        salary_match=salary_match(job.salary_range, candidate.salary_range),
        industry_match=industry_match(job.industry, candidate.industry),
    )


def weighted_score(factors: MatchFactors) -> int:
    total = sum(getattr(factors, name) * weight for name, weight in MATCH_WEIGHTS.items())
    return round_half_up(total * 100)


def build_recommendations(
    factors: MatchFactors, candidate: CandidateProfile, job: JobPosting
) -> List[Recommendation]:
    recommendations = []

    if factors.skills_match < 0.7:
        missing = find_missing_skills(job.required_skills, candidate.skills)
        shown = missing[:RECOMMENDED_SKILLS_SHOWN]
        if shown:
            message = f"Consider developing these skills: {', '.join(shown)}"
        else:
            message = "Consider deepening the skills this role requires"
        recommendations.append(
            Recommendation(
                type="skill-development",
                message=message,
                priority="high",
                action="training",
            )
        )

    if factors.experience_match < 0.6:
        recommendations.append(
            Recommendation(
                type="experience-gap",
                message="This role needs more experience. Consider applying to similar roles at a lower level.",
                priority="medium",
                action="alternative-jobs",
            )
        )

    if factors.location_match < 0.5:
        recommendations.append(
            Recommendation(
                type="location-mismatch",
                message="The location differs from your preference. Would you relocate?",
                priority="low",
                action="location-settings",
            )
        )

    return recommendations


def score(candidate: CandidateLike, job: JobLike) -> MatchResult:
    """
    Score one candidate against one job posting.

    Args:
        candidate: CandidateProfile or raw candidate record
        job: JobPosting or raw job record

    Returns:
        MatchResult with the 0-100 score, the five factors and recommendations
    """
    candidate = normalize_candidate(candidate)
    job = normalize_job(job)
    factors = compute_factors(candidate, job)
    return MatchResult(
        score=weighted_score(factors),
        factors=factors,
        recommendations=build_recommendations(factors, candidate, job),
    )


def rank_jobs(
    candidate: CandidateLike,
    jobs: Iterable[JobLike],
    limit: Optional[int] = 10,
    active_only: bool = False,
) -> List[Tuple[JobPosting, MatchResult]]:
    """Score every job for the candidate, best first. Ties keep input order."""
    candidate = normalize_candidate(candidate)
    scored = []
    for raw in jobs:
        job = normalize_job(raw)
        if active_only and job.status is not JobStatus.ACTIVE:
            continue
        scored.append((job, score(candidate, job)))
    scored.sort(key=lambda pair: pair[1].score, reverse=True)
    return scored if limit is None else scored[:limit]


def analyze_skill_gaps(candidate: CandidateLike, job: JobLike) -> SkillGapAnalysis:
    candidate = normalize_candidate(candidate)
    job = normalize_job(job)

    owned = {s.lower() for s in candidate.skills}
    strengths = [s for s in job.required_skills if s.lower() in owned]
    gaps = find_missing_skills(job.required_skills, candidate.skills)
    return SkillGapAnalysis(
        strengths=strengths,
        gaps=gaps,
        recommendations=[
            SkillGap(
                skill=skill,
                priority=skill_priority(skill),
                estimated_learning_time=learning_time(skill),
                resources=skill_resources(skill),
            )
            for skill in gaps
        ],
    )

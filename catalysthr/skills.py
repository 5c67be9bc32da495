"""
Static lookup tables used by the match scorer.

The skill taxonomy groups technologies by area and by adoption tier. Two
skills are "related" when they sit in the same tier list of the same area.
"""

from typing import Iterable, List, Optional

from .models import ExperienceLevel

SKILL_TAXONOMY = {
    "frontend": {
        "primary": ["React", "Vue.js", "Angular", "JavaScript", "TypeScript"],
        "secondary": ["HTML5", "CSS3", "Sass", "Webpack", "Redux"],
        "emerging": ["Svelte", "Next.js", "Nuxt.js", "Web Components"],
    },
    "backend": {
        "primary": ["Node.js", "Python", "Java", "C#", "PHP"],
        "secondary": ["Express.js", "Django", "Flask", "Spring Boot", "Laravel"],
        "emerging": ["Rust", "Go", "Deno", "GraphQL"],
    },
    "database": {
        "primary": ["MySQL", "PostgreSQL", "MongoDB", "Redis"],
        "secondary": ["Oracle", "SQL Server", "Elasticsearch"],
        "emerging": ["Neo4j", "CockroachDB", "Supabase"],
    },
    "cloud": {
        "primary": ["AWS", "Azure", "Google Cloud"],
        "secondary": ["Docker", "Kubernetes", "Terraform"],
        "emerging": ["Serverless", "Edge Computing", "Microservices"],
    },
    "dataScience": {
        "primary": ["Python", "R", "SQL", "Machine Learning"],
        "secondary": ["Pandas", "NumPy", "TensorFlow", "PyTorch"],
        "emerging": ["AutoML", "MLOps", "Computer Vision", "NLP"],
    },
    "mobile": {
        "primary": ["React Native", "Flutter", "Swift", "Kotlin"],
        "secondary": ["Xamarin", "Ionic", "Cordova"],
        "emerging": ["SwiftUI", "Jetpack Compose"],
    },
}

# Keyed by the candidate's industry.
RELATED_INDUSTRIES = {
    "technology": ["fintech", "healthtech", "edtech", "software"],
    "fintech": ["technology", "banking", "finance"],
    "healthtech": ["technology", "healthcare", "medical"],
    "edtech": ["technology", "education", "training"],
}

CORE_SKILLS = {"javascript", "python", "react", "node.js", "sql"}
FRAMEWORK_SKILLS = {"express", "django", "vue.js", "angular"}

LEARNING_TIME = {
    "javascript": "2-3 months",
    "react": "1-2 months",
    "node.js": "1-2 months",
    "python": "2-3 months",
    "sql": "1 month",
    "docker": "2-3 weeks",
    "aws": "2-3 months",
}
DEFAULT_LEARNING_TIME = "1-2 months"

COUNTRY_TOKENS = ("colombia",)
REMOTE_TOKENS = ("remote", "remoto")


def _lowered(skills: Iterable[str]) -> List[str]:
    return [s.lower() for s in skills]


_TIER_LISTS = [
    _lowered(tier)
    for area in SKILL_TAXONOMY.values()
    for tier in area.values()
]


def skill_group(skill: str) -> Optional[List[str]]:
    """Return the first taxonomy tier list containing ``skill`` (lowercased)."""
    target = skill.lower()
    for tier in _TIER_LISTS:
        if target in tier:
            return tier
    return None


def is_related_skill(target_skill: str, candidate_skills: Iterable[str]) -> bool:
    group = skill_group(target_skill)
    if group is None:
        return False
    return any(s.lower() in group for s in candidate_skills)


def experience_floor(level: Optional[str]) -> int:
    """Map an experience-level label to years; unknown or missing labels give 0."""
    if not level:
        return 0
    key = "-".join(level.strip().lower().replace("_", " ").split())
    try:
        return ExperienceLevel(key).floor
    except ValueError:
        return 0


def skill_priority(skill: str) -> str:
    key = skill.lower()
    if key in CORE_SKILLS:
        return "high"
    if key in FRAMEWORK_SKILLS:
        return "medium"
    return "low"


def learning_time(skill: str) -> str:
    return LEARNING_TIME.get(skill.lower(), DEFAULT_LEARNING_TIME)


def skill_resources(skill: str) -> dict:
    return {
        "online_courses": [f"{skill} course on Catalyst Training"],
        "documentation": [f"Official {skill} documentation"],
        "practice": [f"Hands-on projects with {skill}"],
    }

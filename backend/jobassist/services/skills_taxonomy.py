"""
Skills Taxonomy for standard-format skill grouping

Contains:
- SKILL_SYNONYMS: Maps variations to canonical form
- SKILL_CATEGORIES: Groups canonical skills by category
- KEY_SKILL_GROUPS: Which StandardResume key-skill bucket each category fills
"""
from typing import Dict, List, Optional, Tuple

# Maps skill variations to canonical form
# Key: canonical form, Value: list of variations
SKILL_SYNONYMS = {
    # Programming Languages
    "python": ["python3", "python 3", "py"],
    "javascript": ["js", "es6", "es2015", "ecmascript"],
    "typescript": ["ts"],
    "java": [],
    "c": [],
    "c++": ["cpp", "c plus plus"],
    "c#": ["csharp", "c sharp"],
    "golang": ["go lang", "go"],
    "rust": [],
    "ruby": [],
    "php": [],
    "swift": [],
    "kotlin": [],
    "scala": [],
    "r": ["r lang", "rlang"],
    "sql": ["structured query language"],
    "bash": ["shell", "shell scripting"],

    # Frontend
    "react": ["react.js", "reactjs", "react js"],
    "angular": ["angular.js", "angularjs", "angular 2+"],
    "vue": ["vue.js", "vuejs", "vue js"],
    "next.js": ["nextjs", "next js", "next"],
    "svelte": ["sveltejs"],
    "html": ["html5"],
    "css": ["css3", "cascading style sheets"],
    "sass": ["scss"],
    "tailwind": ["tailwindcss", "tailwind css"],
    "bootstrap": [],

    # Backend
    "node.js": ["nodejs", "node js", "node"],
    "express": ["express.js", "expressjs"],
    "django": [],
    "flask": [],
    "fastapi": ["fast api"],
    "spring": ["spring boot", "springboot"],
    "rails": ["ruby on rails", "ror"],
    "laravel": [],
    ".net": ["dotnet", "dot net", "asp.net"],

    # Databases
    "postgresql": ["postgres", "psql"],
    "mysql": ["my sql"],
    "mongodb": ["mongo", "mongo db"],
    "redis": [],
    "elasticsearch": ["elastic search", "elastic"],
    "dynamodb": ["dynamo db", "dynamo"],
    "firebase": ["firestore"],
    "sqlite": [],
    "oracle": ["oracle db"],
    "cassandra": [],

    # Cloud & DevOps
    "aws": ["amazon web services", "amazon aws"],
    "azure": ["microsoft azure", "ms azure"],
    "gcp": ["google cloud", "google cloud platform"],
    "docker": ["containerization"],
    "kubernetes": ["k8s", "kube"],
    "terraform": [],
    "ansible": [],
    "jenkins": [],
    "ci/cd": ["cicd", "ci cd", "continuous integration", "continuous deployment"],
    "github actions": ["gh actions"],

    # Data & ML
    "machine learning": ["ml", "machine-learning"],
    "deep learning": ["dl", "deep-learning"],
    "tensorflow": ["tf"],
    "pytorch": ["torch"],
    "pandas": [],
    "numpy": [],
    "scikit-learn": ["sklearn", "scikit learn"],
    "spark": ["apache spark", "pyspark"],
    "tableau": [],
    "power bi": ["powerbi", "power-bi"],
    "excel": ["microsoft excel", "ms excel"],

    # Tools & Practices
    "git": ["github", "gitlab", "version control"],
    "jira": ["atlassian jira"],
    "figma": [],
    "postman": [],
    "rest api": ["restful", "rest apis", "restful api"],
    "graphql": ["graph ql"],
    "microservices": ["micro services"],
    "agile": ["agile methodology", "agile development", "scrum", "kanban"],

    # Operating Systems
    "linux": ["unix", "ubuntu", "debian", "centos", "red hat"],
    "windows": ["ms windows", "microsoft windows"],
    "macos": ["mac os", "os x", "osx"],

    # Soft Skills
    "leadership": ["team lead", "team leader"],
    "communication": ["written communication", "verbal communication"],
    "problem solving": ["problem-solving", "analytical thinking"],
    "teamwork": ["collaboration", "team player", "collaborative"],
    "time management": ["time-management"],
    "project management": ["project-management"],
}

# Reverse lookup: variation -> canonical
VARIATION_TO_CANONICAL = {}
for canonical, variations in SKILL_SYNONYMS.items():
    VARIATION_TO_CANONICAL[canonical.lower()] = canonical
    for var in variations:
        VARIATION_TO_CANONICAL[var.lower()] = canonical

SKILL_CATEGORIES = {
    "programming_languages": [
        "python", "javascript", "typescript", "java", "c", "c++", "c#",
        "golang", "rust", "ruby", "php", "swift", "kotlin", "scala", "r", "sql", "bash"
    ],
    "frontend": [
        "react", "angular", "vue", "next.js", "svelte", "html", "css",
        "sass", "tailwind", "bootstrap"
    ],
    "backend": [
        "node.js", "express", "django", "flask", "fastapi", "spring",
        "rails", "laravel", ".net"
    ],
    "databases": [
        "postgresql", "mysql", "mongodb", "redis", "elasticsearch",
        "dynamodb", "firebase", "sqlite", "oracle", "cassandra"
    ],
    "cloud_devops": [
        "aws", "azure", "gcp", "docker", "kubernetes", "terraform",
        "ansible", "jenkins", "ci/cd", "github actions"
    ],
    "data_ml": [
        "machine learning", "deep learning", "tensorflow", "pytorch",
        "pandas", "numpy", "scikit-learn", "spark", "tableau", "power bi", "excel"
    ],
    "tools_practices": [
        "git", "jira", "figma", "postman", "rest api", "graphql", "microservices", "agile"
    ],
    "operating_systems": ["linux", "windows", "macos"],
    "soft_skills": [
        "leadership", "communication", "problem solving", "teamwork",
        "time management", "project management"
    ],
}

# Taxonomy category -> KeySkills attribute on a StandardResume
KEY_SKILL_GROUPS = {
    "programming_languages": "programming_languages",
    "frontend": "web_frameworks",
    "backend": "web_frameworks",
    "databases": "databases",
    "cloud_devops": "tools_and_technologies",
    "data_ml": "tools_and_technologies",
    "tools_practices": "tools_and_technologies",
    "operating_systems": "operating_systems",
}

SOFT_SKILLS_CATEGORY = "soft_skills"
OTHER_GROUP = "other"


def get_canonical_skill(skill: str) -> str:
    """Get canonical form of a skill, or return original if not found."""
    return VARIATION_TO_CANONICAL.get(skill.lower().strip(), skill.lower().strip())


def get_skill_category(skill: str) -> Optional[str]:
    """Get the category a skill belongs to."""
    canonical = get_canonical_skill(skill)
    for category, skills in SKILL_CATEGORIES.items():
        if canonical in skills:
            return category
    return None


def group_skills(skills) -> Tuple[Dict[str, List[str]], List[str]]:
    """
    Sort skills into KeySkills buckets, keeping the user's own spelling.

    Returns (technical groups keyed by KeySkills attribute, soft skills).
    Duplicates by canonical form are dropped; order of first appearance is kept.
    """
    groups: Dict[str, List[str]] = {}
    soft: List[str] = []
    seen = set()
    for skill in skills:
        skill = (skill or "").strip()
        if not skill:
            continue
        canonical = get_canonical_skill(skill)
        if canonical in seen:
            continue
        seen.add(canonical)
        category = get_skill_category(skill)
        if category == SOFT_SKILLS_CATEGORY:
            soft.append(skill)
            continue
        groups.setdefault(KEY_SKILL_GROUPS.get(category, OTHER_GROUP), []).append(skill)
    return groups, soft

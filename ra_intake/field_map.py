# ra_intake/field_map.py
from typing import Dict, Mapping

FIELD_LABELS = {
    # Contact
    "name": "Full Name",
    "email": "Email",
    "institution": "Institution",
    "program": "Program / Degree",
    "education": "Education",

    # Background
    "bio": "Short Bio",
    "portfolio": "Portfolio / Writing Sample",

    # Projects
    "projects": "Projects of Interest",
    "other_project": "Other Project Idea",

    # Motivation
    "interest_reason": "Why are you interested in these projects?",
    "ra_goals": "What do you hope to gain as an RA?",
    "career_goal": "Career Goal",

    # Availability
    "hours_per_week": "Hours per Week",
    "start_date": "Available Start Date",

    # Skills (current vs. to develop)
    "quant_current": "Current Quantitative Skills",
    "quant_develop": "Quantitative Skills to Develop",
    "research_current": "Current Research Skills",
    "research_develop": "Research Skills to Develop",

    # File upload
    "cv": "CV (file)",
    "cv_url": "CV Link",
}

FIELD_ORDER = [
    "name", "email", "institution", "program", "education", "bio",
    "projects", "other_project", "interest_reason", "ra_goals", "career_goal",
    "hours_per_week", "start_date", "portfolio",
    "quant_current", "quant_develop", "research_current", "research_develop",
    "cv", "cv_url",
]

# Form questions tried in order when picking the applicant's name/email
NAME_CANDIDATES = ["Full Name", "Name", "Your Name"]
EMAIL_CANDIDATES = ["Email", "Email Address", "Your Email"]


def label_for(key: str, labels: Mapping[str, str]) -> str:
    return labels.get(key, key)


def default_labels() -> Dict[str, str]:
    return dict(FIELD_LABELS)

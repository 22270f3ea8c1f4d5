from __future__ import annotations

from resume_api.schemas.resume import ResumeContent

# Rendered when an export request carries no usable résumé content.
PLACEHOLDER_RESUME = ResumeContent.model_validate(
    {
        "personalInfo": {
            "name": "John Doe",
            "email": "john.doe@example.com",
            "phone": "+1 (555) 123-4567",
            "location": "New York, NY",
        },
        "professionalSummary": "Experienced professional with expertise in technology.",
        "skills": {
            "technical": ["JavaScript", "React", "Node.js", "Python", "SQL"],
            "soft": ["Communication", "Problem Solving", "Team Work"],
            "tools": ["Git", "Docker"],
        },
        "experience": [
            {
                "title": "Software Developer",
                "company": "Tech Company",
                "duration": "2020 - 2023",
                "description": ["Developed web applications", "Worked with cross-functional teams"],
                "technologies": ["React", "Node.js"],
            }
        ],
        "education": [
            {
                "degree": "Bachelor of Computer Science",
                "institution": "University",
                "year": "2020",
            }
        ],
    }
)


def placeholder_resume() -> ResumeContent:
    return PLACEHOLDER_RESUME.model_copy(deep=True)

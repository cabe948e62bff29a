# resumatch/db/seed.py
from __future__ import annotations

# Default catalog used on first start and by "reset to defaults".
DEFAULT_JOBS: list[dict] = [
    {
        "id": "1",
        "title": "Senior Frontend Engineer",
        "company": "TechFlow Solutions",
        "location": "San Francisco, CA (Remote)",
        "type": "Full-time",
        "description": "Looking for a React expert with TypeScript and Tailwind experience to lead our UI team.",
        "requirements": ["React", "TypeScript", "Tailwind CSS", "5+ years experience", "State Management"],
        "salary_range": "$140k - $180k",
    },
    {
        "id": "2",
        "title": "Data Analyst",
        "company": "Metrics Inc.",
        "location": "New York, NY",
        "type": "Hybrid",
        "description": "Analyze complex datasets to drive business insights using SQL and Python.",
        "requirements": ["SQL", "Python", "Tableau", "Data Visualization", "Communication"],
        "salary_range": "$90k - $120k",
    },
    {
        "id": "3",
        "title": "Product Manager",
        "company": "InnovateCreate",
        "location": "Austin, TX",
        "type": "Full-time",
        "description": "Lead the product lifecycle from concept to launch for our SaaS platform.",
        "requirements": ["Product Strategy", "Agile", "JIRA", "User Research", "Roadmapping"],
        "salary_range": "$130k - $160k",
    },
    {
        "id": "4",
        "title": "Junior Backend Developer",
        "company": "CloudSystems",
        "location": "Remote",
        "type": "Contract",
        "description": "Support backend API development using Node.js and Express.",
        "requirements": ["Node.js", "Express", "MongoDB", "REST APIs", "Git"],
        "salary_range": "$70k - $90k",
    },
    {
        "id": "5",
        "title": "UX/UI Designer",
        "company": "Creative Studio",
        "location": "Los Angeles, CA",
        "type": "Full-time",
        "description": "Design intuitive and beautiful user interfaces for web and mobile apps.",
        "requirements": ["Figma", "Prototyping", "User Flows", "HTML/CSS knowledge", "Design Systems"],
        "salary_range": "$100k - $130k",
    },
]

DEFAULT_JOB_IDS = [j["id"] for j in DEFAULT_JOBS]

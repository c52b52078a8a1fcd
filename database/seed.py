"""
Seed data for the simulated backend.

Fills an empty store with jobs, an assessment per job, candidates spread
round-robin over the jobs (each with a timeline up to its current stage)
and recruiter notes. Everything is written in a single transaction.
"""

import logging
import random
from typing import Optional

from api.schemas.assessments import Assessment, Section
from api.schemas.candidates import Candidate, Note, TimelineEvent
from api.schemas.jobs import Job
from core.utils.datetime import add_days
from core.utils.slug import slugify
from database.models.candidates import STAGE_ORDER, CandidateStage
from database.models.jobs import JobStatus
from database.store import EntityStore, Table

logger = logging.getLogger(__name__)

FIRST_NAMES = [
    "Ava", "Noah", "Liam", "Mia", "Olivia", "Ethan", "Lucas", "Ella", "Zoe", "Kai",
    "Ivy", "Leo", "Ezra", "Nora", "Aiden", "Maya", "Sofia", "Mason", "Aria", "Elena",
]
LAST_NAMES = [
    "Nguyen", "Johnson", "Garcia", "Patel", "Khan", "Osei", "Martinez", "Kim", "Schmidt", "Silva",
    "Hernandez", "Williams", "Lopez", "Singh", "Brown", "Li", "Chen", "Wilson", "Davis", "Clark",
]
JOB_TITLES = [
    "Frontend Engineer", "Backend Engineer", "Fullstack Developer", "Product Manager",
    "Data Scientist", "ML Engineer", "DevOps Engineer", "QA Analyst", "UI/UX Designer",
    "Technical Writer", "Solutions Architect", "Security Engineer", "Mobile Developer",
    "Growth Manager", "Customer Success Lead", "People Operations Partner", "Support Engineer",
    "Site Reliability Engineer", "Research Scientist", "Hardware Engineer",
]
JOB_TAGS = [
    "Remote", "Hybrid", "Onsite", "Contract", "Full-time", "Equity", "Urgent", "Diversity",
    "Graduate", "Leadership", "Staff", "Junior", "Design", "Engineering", "Product",
]
EMAIL_DOMAINS = ["example.com", "talentflow.dev", "mail.com", "workmail.co", "hireme.org"]
PHONE_PREFIXES = ["202", "303", "415", "512", "617", "718", "917"]
MENTION_AUTHORS = ["Alex Rivera", "Priya Desai", "Morgan Lee", "Sam Parker", "Taylor Chen"]

# Question templates. A question with ``expectedValue`` is conditional on the
# question right before it.
ASSESSMENT_TEMPLATES: list[list[dict]] = [
    [
        {"type": "singleChoice", "prompt": "How many years of professional experience do you have with React?",
         "required": True, "options": ["0-1", "2-3", "4-5", "6+"]},
        {"type": "shortText", "prompt": "Describe a challenging frontend performance issue you solved.",
         "required": True, "maxLength": 280},
        {"type": "numeric", "prompt": "How many people have you mentored directly?", "min": 0, "max": 50},
        {"type": "multiChoice", "prompt": "Which build tools have you used in production?", "required": True,
         "options": ["Webpack", "Vite", "Rollup", "Parcel", "ESBuild"], "maxSelections": 3},
        {"type": "longText", "prompt": "Share a system design you are proud of.", "required": True},
        {"type": "singleChoice", "prompt": "Are you comfortable working across time zones?", "required": True,
         "options": ["Yes", "No"]},
        {"type": "shortText", "prompt": "If you answered yes above, describe your strategy for async collaboration.",
         "maxLength": 200, "expectedValue": "Yes"},
        {"type": "file", "prompt": "Upload a portfolio or case study (link placeholder)."},
        {"type": "singleChoice", "prompt": "Are you legally authorized to work in the hiring region?",
         "required": True, "options": ["Yes", "No"]},
        {"type": "numeric", "prompt": "Preferred team size.", "min": 1, "max": 20},
    ],
    [
        {"type": "singleChoice", "prompt": "How comfortable are you with stakeholder communication?",
         "required": True, "options": ["Beginner", "Intermediate", "Advanced"]},
        {"type": "longText", "prompt": "Walk through a time you managed conflicting priorities.", "required": True},
        {"type": "multiChoice", "prompt": "Select the frameworks you have launched products with.",
         "required": True, "options": ["Scrum", "Kanban", "Dual Track Agile", "Shape Up"], "maxSelections": 2},
        {"type": "shortText", "prompt": "What is your biggest product intuition win?", "required": True,
         "maxLength": 220},
        {"type": "numeric", "prompt": "How many product launches have you led?", "required": True,
         "min": 0, "max": 50},
        {"type": "singleChoice", "prompt": "Do you have experience with P&L ownership?", "required": True,
         "options": ["Yes", "No"]},
        {"type": "shortText", "prompt": "If yes, describe the scope of the P&L you managed.",
         "expectedValue": "Yes"},
        {"type": "multiChoice", "prompt": "Which tools have you used for roadmap planning?", "required": True,
         "options": ["Jira", "Linear", "Aha!", "Productboard", "Notion"], "maxSelections": 3},
        {"type": "longText", "prompt": "Describe how you measure feature success.", "required": True},
        {"type": "singleChoice", "prompt": "Are you comfortable working with technical teams?", "required": True,
         "options": ["Yes", "No"]},
    ],
    [
        {"type": "shortText", "prompt": "What data stack do you currently use?", "required": True},
        {"type": "singleChoice", "prompt": "Do you productionize models?", "required": True,
         "options": ["Yes", "No"]},
        {"type": "multiChoice", "prompt": "Choose the cloud platforms you have deployed on.", "required": True,
         "options": ["AWS", "GCP", "Azure", "DigitalOcean"], "maxSelections": 3},
        {"type": "numeric", "prompt": "Number of experiments you ran last quarter.", "min": 0, "max": 100},
        {"type": "longText", "prompt": "Tell us about a surprising insight from your data work.", "required": True},
        {"type": "singleChoice", "prompt": "Do you work with BI stakeholders regularly?", "required": True,
         "options": ["Yes", "No"]},
        {"type": "shortText", "prompt": "If yes, how do you align deliverables?", "expectedValue": "Yes"},
        {"type": "multiChoice", "prompt": "What analytics tools have you configured?", "required": True,
         "options": ["Looker", "Tableau", "PowerBI", "Metabase", "Mode"], "maxSelections": 3},
        {"type": "file", "prompt": "Upload a dashboard export or share a link placeholder."},
        {"type": "longText", "prompt": "Describe a model you would revisit with more time.", "required": True},
    ],
]


def _random_name(rng: random.Random) -> str:
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"


def _random_email(rng: random.Random, name: str, serial: int) -> str:
    local = slugify(name).replace("-", ".")
    return f"{local}.{serial}@{rng.choice(EMAIL_DOMAINS)}"


def _random_tags(rng: random.Random) -> list[str]:
    return rng.sample(JOB_TAGS, rng.randint(2, 4))


def _random_phone(rng: random.Random) -> str:
    return f"{rng.choice(PHONE_PREFIXES)}-{rng.randint(100, 999)}-{rng.randint(1000, 9999)}"


def _random_color(rng: random.Random) -> str:
    return f"hsl({rng.randint(0, 360)}, 70%, 60%)"


def stage_history(stage: CandidateStage) -> list[CandidateStage]:
    """Stages a candidate passed through to reach ``stage``, oldest first."""
    if stage == CandidateStage.REJECTED:
        return STAGE_ORDER[: STAGE_ORDER.index(CandidateStage.OFFER) + 1] + [CandidateStage.REJECTED]
    return STAGE_ORDER[: STAGE_ORDER.index(stage) + 1]


def build_assessment(store: EntityStore, index: int, job_id: str) -> Assessment:
    """Assessment for the ``index``-th seeded job, cycling through the templates."""
    questions = []
    previous_id: Optional[str] = None
    for template in ASSESSMENT_TEMPLATES[index % len(ASSESSMENT_TEMPLATES)]:
        question = {key: value for key, value in template.items() if key != "expectedValue"}
        question["id"] = store.ids.next("q")
        if "expectedValue" in template and previous_id is not None:
            question["conditional"] = {
                "sourceQuestionId": previous_id,
                "expectedValue": template["expectedValue"],
            }
        questions.append(question)
        previous_id = question["id"]

    section = Section.model_validate(
        {
            "id": store.ids.next("section"),
            "title": "Core Fit",
            "description": "Evaluate alignment and experience across focus areas.",
            "questions": questions,
        }
    )
    return Assessment(job_id=job_id, sections=[section], updated_at=store.clock())


async def ensure_seed_data(
    store: EntityStore,
    rng: Optional[random.Random] = None,
    job_count: int = 25,
    candidate_count: int = 1000,
) -> bool:
    """
    Seed an empty store.

    Args:
        store: Entity store to fill
        rng: Random source; pass a seeded one for reproducible data
        job_count: Number of jobs (every fifth one archived)
        candidate_count: Number of candidates, spread round-robin over jobs

    Returns:
        True if data was written, False if jobs already existed
    """
    rng = rng or random.Random()

    async with store.transaction(
        Table.JOBS, Table.CANDIDATES, Table.TIMELINES, Table.NOTES, Table.ASSESSMENTS
    ) as tx:
        if await tx.count(Table.JOBS) > 0:
            logger.info("Store already has jobs; skipping seed")
            return False

        timestamp = store.clock()
        jobs: list[Job] = []
        assessments: list[Assessment] = []
        for i in range(job_count):
            title = f"{rng.choice(JOB_TITLES)} {i + 1}"
            job = Job(
                id=store.ids.next("job"),
                title=title,
                slug=f"{slugify(title)}-{i + 1}",
                status=JobStatus.ARCHIVED if i % 5 == 0 else JobStatus.ACTIVE,
                tags=_random_tags(rng),
                order=i,
                description=(
                    f"We are hiring a {title} to join our growing team "
                    "and solve complex business challenges."
                ),
                openings=rng.randint(1, 4),
                created_at=timestamp,
                updated_at=timestamp,
            )
            jobs.append(job)
            assessments.append(build_assessment(store, i, job.id))

        candidates: list[Candidate] = []
        timelines: list[TimelineEvent] = []
        notes: list[Note] = []
        for i in range(candidate_count if jobs else 0):
            name = _random_name(rng)
            stage = rng.choice(STAGE_ORDER)
            applied_at = add_days(timestamp, -rng.randint(1, 45))
            candidate = Candidate(
                id=store.ids.next("cand"),
                job_id=jobs[i % len(jobs)].id,
                name=name,
                email=_random_email(rng, name, i + 1),
                stage=stage,
                applied_at=applied_at,
                avatar_color=_random_color(rng),
                phone=_random_phone(rng),
            )
            candidates.append(candidate)

            history = stage_history(stage)
            for position, history_stage in enumerate(history):
                timelines.append(
                    TimelineEvent(
                        id=store.ids.next("tl"),
                        candidate_id=candidate.id,
                        stage=history_stage,
                        changed_at=add_days(applied_at, position),
                        note=f"Moved to {history_stage.value}" if position == len(history) - 1 else None,
                    )
                )

            if i % 4 == 0:
                notes.append(
                    Note(
                        id=store.ids.next("note"),
                        candidate_id=candidate.id,
                        author=_random_name(rng),
                        content=(
                            f"@{rng.choice(MENTION_AUTHORS)} please review portfolio "
                            "before the next round."
                        ),
                        created_at=add_days(applied_at, 3),
                    )
                )

        await tx.insert_many(Table.JOBS, jobs)
        await tx.insert_many(Table.ASSESSMENTS, assessments)
        await tx.insert_many(Table.CANDIDATES, candidates)
        await tx.insert_many(Table.TIMELINES, timelines)
        await tx.insert_many(Table.NOTES, notes)

    logger.info(
        f"Seeded {len(jobs)} jobs, {len(candidates)} candidates, "
        f"{len(timelines)} timeline events, {len(notes)} notes"
    )
    return True

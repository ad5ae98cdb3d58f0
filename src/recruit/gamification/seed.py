"""Badge catalogue seed data."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recruit.db.models import BadgeDefinition

logger = logging.getLogger(__name__)

# Categories a user may claim for themselves through /api/award-badge.
SELF_AWARDABLE_CATEGORIES = frozenset({"preparation", "engagement"})


def _badge(slug: str, name: str, description: str, category: str, points: int) -> dict:
    return {"slug": slug, "name": name, "description": description, "category": category, "points": points}


BADGE_SEED_DATA: list[dict] = [
    # Application preparation
    _badge("written", "Written Test", "Completed written test preparation", "preparation", 25),
    _badge("oral", "Oral Board", "Prepared for oral board interviews", "preparation", 25),
    _badge("physical", "Physical Test", "Completed physical test preparation", "preparation", 25),
    _badge("polygraph", "Polygraph", "Learned about the polygraph process", "preparation", 25),
    _badge("psychological", "Psychological", "Prepared for psychological evaluation", "preparation", 25),
    _badge("full", "Full Process", "Completed all preparation areas", "preparation", 100),
    # Engagement
    _badge("chat-participation", "Chat Participation", "Engaged with Sgt. Ken", "engagement", 10),
    _badge("first-response", "First Response", "Received first response from Sgt. Ken", "engagement", 10),
    _badge("application-started", "Application Started", "Started the application process", "engagement", 25),
    _badge(
        "application-completed", "Application Completed", "Completed the application process", "application", 100
    ),
    _badge("frequent-user", "Frequent User", "Regularly engages with the recruitment platform", "engagement", 25),
    _badge(
        "resource-downloader", "Resource Downloader", "Downloaded recruitment resources and materials",
        "engagement", 15,
    ),
    _badge("hard-charger", "Hard Charger", "Consistently asks questions and has applied", "application", 50),
    _badge("connector", "Connector", "Connects with other participants", "engagement", 25),
    _badge("deep-diver", "Deep Diver", "Explores topics in great detail", "engagement", 25),
    _badge("quick-learner", "Quick Learner", "Rapidly progresses through recruitment information", "engagement", 25),
    _badge("persistent-explorer", "Persistent Explorer", "Returns regularly to learn more", "engagement", 25),
    _badge("dedicated-applicant", "Dedicated Applicant", "Applied and continues to engage", "application", 50),
    # Donations
    _badge("first-donation", "First Donation", "Made your first donation", "donation", 25),
    _badge("recurring-donor", "Recurring Donor", "Set up a recurring donation", "donation", 50),
    _badge("generous-donor", "Generous Donor", "Made a single donation of $100 or more", "donation", 50),
    _badge("donation-milestone-5", "Supporter", "Made 5 donations", "donation", 50),
    _badge("donation-milestone-10", "Champion", "Made 10 donations", "donation", 100),
    _badge("donation-milestone-25", "Patron", "Made 25 donations", "donation", 250),
    _badge("donation-amount-250", "Bronze Benefactor", "Donated $250 in total", "donation", 50),
    _badge("donation-amount-500", "Silver Benefactor", "Donated $500 in total", "donation", 100),
    _badge("donation-amount-1000", "Gold Benefactor", "Donated $1,000 in total", "donation", 200),
    # Trivia
    _badge("trivia-participant", "Trivia Participant", "Completed your first trivia game", "trivia", 10),
    _badge("trivia-enthusiast", "Trivia Enthusiast", "Completed 5 trivia games", "trivia", 25),
    _badge("trivia-master", "Trivia Master", "Achieved 3 perfect trivia games", "trivia", 50),
    _badge("challenge-champion", "Challenge Champion", "Perfect score in challenge mode", "trivia", 50),
    _badge("speed-demon", "Speed Demon", "Answered 10 questions correctly in under 5 seconds", "trivia", 25),
    # Background checklist
    _badge(
        "background-prepared", "Background Prepared", "Gathered every required background document",
        "checklist", 25,
    ),
    _badge("document-master", "Document Master", "Gathered every background document", "checklist", 50),
]


async def seed_badges(db: AsyncSession) -> int:
    """Insert or refresh every badge definition. Returns the number seeded."""
    existing = {
        b.slug: b for b in (await db.execute(select(BadgeDefinition))).scalars()
    }
    for sort_order, data in enumerate(BADGE_SEED_DATA, start=1):
        badge = existing.get(data["slug"])
        if badge is None:
            db.add(BadgeDefinition(**data, sort_order=sort_order))
            continue
        for key, value in data.items():
            setattr(badge, key, value)
        badge.sort_order = sort_order

    await db.commit()
    logger.info("Seeded %d badge definitions", len(BADGE_SEED_DATA))
    return len(BADGE_SEED_DATA)

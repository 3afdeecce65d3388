"""Health and social scoring.

Both scores are pure functions of stored state: recomputing from scratch at any
time yields the same value as the incremental update done after an interaction.
"""
import math
from datetime import datetime
from typing import Sequence

from relmap.domain.common.types import as_utc
from relmap.domain.social.models import MAX_HEALTH_SCORE, MIN_HEALTH_SCORE, Person

BASE_SCORE = 5.0
QUALITY_WINDOW = 3
SECONDS_PER_DAY = 86400.0

RECENT_CONTACT_DAYS = 7
REGULAR_CONTACT_DAYS = 30
STALE_CONTACT_DAYS = 180

# Diversity bonus is capped at +2
MAX_DIVERSITY_BONUS = 2.0


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def round_half_up(x: float) -> int:
    """Round to nearest integer, ties toward +inf (2.5 -> 3)."""
    return int(math.floor(x + 0.5))


def days_since_contact(person: Person, now: datetime) -> float:
    delta = as_utc(now) - as_utc(person.last_contact_at)
    return delta.total_seconds() / SECONDS_PER_DAY


def quality_adjustment(person: Person) -> float:
    """Half the distance of the recent mean quality from the neutral 5."""
    recent = person.interactions[-QUALITY_WINDOW:]
    if not recent:
        return 0.0
    mean_quality = sum(i.quality_score for i in recent) / len(recent)
    return (mean_quality - BASE_SCORE) / 2


def recency_adjustment(days: float) -> float:
    if days < RECENT_CONTACT_DAYS:
        return 2.0
    if days < REGULAR_CONTACT_DAYS:
        return 1.0
    if days > STALE_CONTACT_DAYS:
        return -2.0
    return 0.0


def compute_health_score(person: Person, now: datetime) -> int:
    """Health score in [0, 10] from recent interaction quality and contact recency."""
    score = BASE_SCORE
    score += quality_adjustment(person)
    score += recency_adjustment(days_since_contact(person, now))
    score = clamp(score, MIN_HEALTH_SCORE, MAX_HEALTH_SCORE)
    return round_half_up(score)


def average_health(persons: Sequence[Person]) -> float:
    """Exact mean health score; 0 when there are no relationships."""
    if not persons:
        return 0.0
    return sum(p.health_score for p in persons) / len(persons)


def volume_adjustment(count: int) -> float:
    if count > 15:
        return 3.0
    if count > 10:
        return 2.0
    if count > 5:
        return 1.0
    return 0.0


def calculate_social_score(persons: Sequence[Person]) -> int:
    """Pillar-level social score in [0, 10].

    Combines how many relationships exist, their average health (rounded the
    same way as the graph summary) and how many distinct support roles are
    covered.
    """
    covered_roles = {role for p in persons for role in p.support_roles}

    score = BASE_SCORE
    score += volume_adjustment(len(persons))
    score += (round_half_up(average_health(persons)) - BASE_SCORE) / 2
    score += min(MAX_DIVERSITY_BONUS, len(covered_roles) / 3)
    score = clamp(score, MIN_HEALTH_SCORE, MAX_HEALTH_SCORE)
    return round_half_up(score)

"""
Persist generated activities and record the path's duration estimate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from loguru import logger

from pathgen.db.store import DocumentStore
from pathgen.exceptions import PersistenceFailure

from .schemas import GeneratedActivity

ACTIVITIES_PER_HOUR = 5


def estimate_duration_hours(count: int) -> int:
    """Whole hours needed for a number of activities (5 per hour, rounded up)."""
    return math.ceil(count / ACTIVITIES_PER_HOUR)


@dataclass
class PersistenceOutcome:
    created: int = 0


def persist_activities(
    store: DocumentStore,
    path_id,
    activities: list[GeneratedActivity],
) -> PersistenceOutcome:
    """
    Bulk insert activities, then update the duration estimate.

    A failed insert is logged and reported as zero created; the duration is
    then left untouched.
    """
    try:
        rows = store.add_activities(path_id, [activity.to_row() for activity in activities])
    except PersistenceFailure as e:
        logger.error(f"Could not store activities for learning path {path_id}: {e}")
        return PersistenceOutcome()

    hours = estimate_duration_hours(len(rows))
    try:
        store.set_duration_estimate(path_id, hours)
    except PersistenceFailure as e:
        logger.error(f"Could not update duration for learning path {path_id}: {e}")
    else:
        logger.info(f"Stored {len(rows)} activities, estimated {hours}h")

    return PersistenceOutcome(created=len(rows))

"""
Celery tasks for the identity store.

This module defines background tasks for:
- Friendship symmetry auditing

Related files:
    - services.py: IdentityService.find_asymmetric_friendships
    - config/settings.py: CELERY_BEAT_SCHEDULE entry

Usage:
    from authentication.tasks import audit_friendship_symmetry

    audit_friendship_symmetry.delay(auto_repair=True)
"""

import logging

from celery import shared_task

from authentication.services import IdentityService

logger = logging.getLogger(__name__)


@shared_task
def audit_friendship_symmetry(auto_repair: bool = False) -> int:
    """
    Report friendships held in one direction only.

    A one-sided friendship silently blocks delivery in both directions,
    since the friendship gate requires both rows. Each finding is logged;
    with ``auto_repair`` the missing direction is added.

    Args:
        auto_repair: Add the missing reverse rows after reporting

    Returns:
        Number of one-sided friendships found
    """
    findings = IdentityService.find_asymmetric_friendships()

    for holder, friend in findings:
        logger.warning(
            f"One-sided friendship: {holder} lists {friend} but not the reverse"
        )

    if findings and auto_repair:
        IdentityService.repair_asymmetric_friendships()

    logger.info(f"Friendship audit finished: {len(findings)} one-sided")
    return len(findings)

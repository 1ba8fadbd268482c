"""
Profile Bridge: reconcile local evidence with the durable profile record.

Decision table (evaluated in order):

    local evidence >= 20              -> LOCAL   recompute, upsert, return fresh profile
    local evidence  < 20, record      -> REMOTE  return the stored record verbatim
    local evidence  < 20, no record   -> NONE    return no profile

Store failures never escape: a failed write still returns the fresh
profile, and a failed read counts as "no record". Concurrent writers
race with last-write-wins semantics; every write is a full recomputation.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from src.learning_style.classifier import has_minimum_evidence
from src.learning_style.engine import compute_profile
from src.learning_style.exceptions import RepositoryError
from src.learning_style.models import BehavioralDataPoint, LearningStyleProfile
from src.learning_style.repository import ProfileRepository


class ProfileSource(str, Enum):
    """Where a resolved profile came from."""
    LOCAL = "local"      # Fresh recomputation from local evidence
    REMOTE = "remote"    # Stored record from the durable store
    NONE = "none"        # Not enough data yet


@dataclass
class ProfileResolution:
    """Outcome of a profile request."""
    profile: Optional[LearningStyleProfile]
    source: ProfileSource
    persisted: bool = False
    local_interactions: int = 0

    @property
    def has_profile(self) -> bool:
        return self.profile is not None


def decide_source(local_count: int, has_remote_record: bool) -> ProfileSource:
    """Pure decision table for which profile to trust."""
    if has_minimum_evidence(local_count):
        return ProfileSource.LOCAL
    if has_remote_record:
        return ProfileSource.REMOTE
    return ProfileSource.NONE


class ProfileBridge:
    """
    Serve learning style profiles for one durable store.

    The host owns both the local evidence collection and the repository;
    the bridge holds no state between calls.
    """

    def __init__(self, repository: ProfileRepository):
        self.repository = repository

    async def resolve(
        self, user_id: str, points: Sequence[BehavioralDataPoint]
    ) -> ProfileResolution:
        """Return the best available profile for a user."""
        local_count = len(points)

        if decide_source(local_count, has_remote_record=False) is ProfileSource.LOCAL:
            return await self._recompute_and_persist(user_id, points)

        remote = await self._read_remote(user_id)
        source = decide_source(local_count, has_remote_record=remote is not None)
        if source is ProfileSource.REMOTE:
            logger.debug(
                f"Using stored profile for {user_id} "
                f"({local_count} local interactions below threshold)"
            )
        else:
            logger.info(f"No learning style profile available for {user_id} yet")
        return ProfileResolution(profile=remote, source=source, local_interactions=local_count)

    async def recompute(
        self, user_id: str, points: Sequence[BehavioralDataPoint]
    ) -> ProfileResolution:
        """
        Explicit "recompute now" trigger.

        Never reads the durable copy; below the evidence threshold nothing
        is computed or written.
        """
        local_count = len(points)
        if not has_minimum_evidence(local_count):
            logger.info(
                f"Skipping recompute for {user_id}: {local_count} interactions below threshold"
            )
            return ProfileResolution(
                profile=None, source=ProfileSource.NONE, local_interactions=local_count
            )
        return await self._recompute_and_persist(user_id, points)

    async def _recompute_and_persist(
        self, user_id: str, points: Sequence[BehavioralDataPoint]
    ) -> ProfileResolution:
        profile = compute_profile(points)
        persisted = await self._write_remote(user_id, profile)
        return ProfileResolution(
            profile=profile,
            source=ProfileSource.LOCAL,
            persisted=persisted,
            local_interactions=len(points),
        )

    async def _read_remote(self, user_id: str) -> Optional[LearningStyleProfile]:
        try:
            return await self.repository.fetch(user_id)
        except RepositoryError as e:
            logger.warning(f"Profile read failed for {user_id}, treating as absent: {e}")
            return None

    async def _write_remote(self, user_id: str, profile: LearningStyleProfile) -> bool:
        try:
            await self.repository.upsert(user_id, profile)
        except RepositoryError as e:
            logger.warning(f"Profile write failed for {user_id}, keeping fresh profile: {e}")
            return False
        return True

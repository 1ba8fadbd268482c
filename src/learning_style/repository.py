"""
Durable Profile Repositories

Adapters for the store that keeps one advisory learning style record
per user identity. All adapters expose the same async interface:

    profile = await repo.fetch(user_id)       # None when no record exists
    await repo.upsert(user_id, profile)       # overwrite, last write wins
    profiles = await repo.list_all()          # {user_id: profile}

Failures surface as RepositoryError; deciding what a failure means
is left to the ProfileBridge.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol, runtime_checkable

import httpx
from loguru import logger
from pydantic import ValidationError
from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError

from config import Settings, get_settings
from src.db.database import init_db, session_scope
from src.db.models import LearningStyleProfileRow
from src.learning_style.exceptions import MalformedObservationError, RepositoryError
from src.learning_style.models import LearningStyleProfile
from src.learning_style.schemas import ProfileRecord


@runtime_checkable
class ProfileRepository(Protocol):
    """Read-by-identity / upsert-by-identity store for learning style profiles."""

    async def fetch(self, user_id: str) -> LearningStyleProfile | None: ...

    async def upsert(self, user_id: str, profile: LearningStyleProfile) -> None: ...

    async def list_all(self) -> dict[str, LearningStyleProfile]: ...


def restore_profile(record: ProfileRecord) -> LearningStyleProfile:
    """Rebuild a stored record, reporting corrupt content as a read failure."""
    try:
        return record.to_profile()
    except (MalformedObservationError, ValueError) as e:
        raise RepositoryError(
            f"Stored profile for {record.user_id} is corrupt: {e}", record.user_id
        ) from e


# =============================================================================
# In-memory
# =============================================================================


class InMemoryProfileRepository:
    """Process-local store, used offline and in tests."""

    def __init__(self, records: dict[str, ProfileRecord] | None = None):
        self._records: dict[str, ProfileRecord] = dict(records or {})

    async def fetch(self, user_id: str) -> LearningStyleProfile | None:
        record = self._records.get(user_id)
        return restore_profile(record) if record else None

    async def upsert(self, user_id: str, profile: LearningStyleProfile) -> None:
        self._records[user_id] = ProfileRecord.from_profile(user_id, profile)

    async def list_all(self) -> dict[str, LearningStyleProfile]:
        return {user_id: restore_profile(record) for user_id, record in self._records.items()}


# =============================================================================
# SQL (SQLAlchemy)
# =============================================================================


class SqlProfileRepository:
    """
    SQLAlchemy-backed store for the ``learning_style_profiles`` table.

    Session work is blocking, so it runs in a worker thread to keep the
    async interface honest.
    """

    def __init__(self, engine: Engine | None = None, create_tables: bool = False):
        self.engine = engine
        if create_tables:
            init_db(engine)

    async def fetch(self, user_id: str) -> LearningStyleProfile | None:
        try:
            return await asyncio.to_thread(self._fetch_sync, user_id)
        except (SQLAlchemyError, ValidationError) as e:
            raise RepositoryError(f"Failed to read profile for {user_id}: {e}", user_id) from e

    async def upsert(self, user_id: str, profile: LearningStyleProfile) -> None:
        record = ProfileRecord.from_profile(user_id, profile)
        try:
            await asyncio.to_thread(self._upsert_sync, record)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to write profile for {user_id}: {e}", user_id) from e

    async def list_all(self) -> dict[str, LearningStyleProfile]:
        try:
            return await asyncio.to_thread(self._list_sync)
        except (SQLAlchemyError, ValidationError) as e:
            raise RepositoryError(f"Failed to list profiles: {e}") from e

    def _fetch_sync(self, user_id: str) -> LearningStyleProfile | None:
        with session_scope(self.engine) as session:
            row = session.scalars(
                select(LearningStyleProfileRow).where(LearningStyleProfileRow.user_id == user_id)
            ).one_or_none()
            if row is None:
                return None
            return restore_profile(ProfileRecord.model_validate(row))

    def _upsert_sync(self, record: ProfileRecord) -> None:
        with session_scope(self.engine) as session:
            row = session.scalars(
                select(LearningStyleProfileRow).where(
                    LearningStyleProfileRow.user_id == record.user_id
                )
            ).one_or_none()
            if row is None:
                row = LearningStyleProfileRow(user_id=record.user_id)
                session.add(row)

            values = record.model_dump(exclude={"user_id"})
            # SQLite cannot round-trip tz-aware datetimes; store naive UTC
            if values["last_analyzed_at"] is not None:
                values["last_analyzed_at"] = values["last_analyzed_at"].replace(tzinfo=None)
            for column, value in values.items():
                setattr(row, column, value)

        logger.debug(f"Upserted learning style profile for {record.user_id}")

    def _list_sync(self) -> dict[str, LearningStyleProfile]:
        with session_scope(self.engine) as session:
            rows = session.scalars(
                select(LearningStyleProfileRow).order_by(LearningStyleProfileRow.user_id)
            ).all()
            return {row.user_id: restore_profile(ProfileRecord.model_validate(row)) for row in rows}


# =============================================================================
# Hosted backend (PostgREST-style HTTP API)
# =============================================================================


class RestProfileRepository:
    """
    HTTP adapter for a hosted backend exposing the profile table over REST.

    Usage:
        async with RestProfileRepository(base_url, api_key) as repo:
            profile = await repo.fetch(user_id)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        endpoint: str = "/rest/v1/learning_style_profiles",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RestProfileRepository":
        settings = settings or get_settings()
        if not settings.has_rest_configured():
            logger.warning("REST profile store has no API key; requests will be unauthenticated")
        return cls(**settings.get_rest_config())

    async def __aenter__(self) -> "RestProfileRepository":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["apikey"] = self.api_key
                headers["Authorization"] = f"Bearer {self.api_key}"

            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, user_id: str) -> LearningStyleProfile | None:
        rows = await self._get_rows({"user_id": f"eq.{user_id}", "select": "*", "limit": 1}, user_id)
        if not rows:
            return None
        return restore_profile(self._parse(rows[0], user_id))

    async def upsert(self, user_id: str, profile: LearningStyleProfile) -> None:
        record = ProfileRecord.from_profile(user_id, profile)
        try:
            client = await self._ensure_client()
            response = await client.post(
                self.endpoint,
                params={"on_conflict": "user_id"},
                json=record.to_payload(),
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
            )
        except httpx.RequestError as e:
            raise RepositoryError(f"Connection error writing profile for {user_id}: {e}", user_id) from e

        if response.status_code not in (200, 201, 204):
            raise RepositoryError(
                f"Profile upsert for {user_id} failed: HTTP {response.status_code}", user_id
            )
        logger.debug(f"Upserted learning style profile for {user_id} via REST")

    async def list_all(self) -> dict[str, LearningStyleProfile]:
        rows = await self._get_rows({"select": "*", "order": "user_id.asc"})
        profiles = {}
        for row in rows:
            record = self._parse(row)
            profiles[record.user_id] = restore_profile(record)
        return profiles

    async def _get_rows(self, params: dict[str, Any], user_id: str | None = None) -> list[dict]:
        try:
            client = await self._ensure_client()
            response = await client.get(self.endpoint, params=params)
        except httpx.RequestError as e:
            raise RepositoryError(f"Connection error reading profiles: {e}", user_id) from e

        if response.status_code != 200:
            raise RepositoryError(f"Profile read failed: HTTP {response.status_code}", user_id)

        try:
            data = response.json()
        except ValueError as e:
            raise RepositoryError(f"Profile read returned a non-JSON body: {e}", user_id) from e
        if not isinstance(data, list):
            raise RepositoryError(f"Unexpected profile payload: {type(data).__name__}", user_id)
        return data

    @staticmethod
    def _parse(row: dict, user_id: str | None = None) -> ProfileRecord:
        try:
            return ProfileRecord.model_validate(row)
        except ValidationError as e:
            raise RepositoryError(f"Malformed profile record: {e}", user_id) from e


def get_repository(settings: Settings | None = None) -> ProfileRepository:
    """Build the repository selected by ``profile_backend``."""
    settings = settings or get_settings()
    if settings.profile_backend == "rest":
        return RestProfileRepository.from_settings(settings)
    if settings.profile_backend == "memory":
        return InMemoryProfileRepository()
    return SqlProfileRepository(create_tables=True)

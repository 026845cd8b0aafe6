"""
Data access for facts.

The board never talks to a database directly; it goes through a FactStore.
Two backends are provided:
- SqlFactStore: SQLAlchemy session over the local ``fact`` table
- RestFactStore: PostgREST/Supabase REST client over httpx

Both raise StoreError on backend failures and never retry.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from til.config import Settings, get_settings
from til.database import Fact, SessionLocal
from til.models import Category, FactResponse, VoteType


logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 1000


class StoreError(Exception):
    """The backing store failed to serve a request."""


class FactNotFoundError(StoreError):
    """No fact with the requested id."""

    def __init__(self, fact_id: int):
        super().__init__(f"Fact {fact_id} not found")
        self.fact_id = fact_id


def _category_value(category: Union[Category, str, None]) -> Optional[str]:
    if isinstance(category, Category):
        return category.value
    return category


class FactStore(ABC):
    """Interface shared by the store backends."""

    backend = "base"

    @abstractmethod
    def list_facts(
        self,
        category: Union[Category, str, None] = None,
        limit: int = DEFAULT_LIMIT
    ) -> List[FactResponse]:
        """Facts in ``category`` (all when None), most interesting first."""
        raise NotImplementedError

    @abstractmethod
    def get_fact(self, fact_id: int) -> Optional[FactResponse]:
        raise NotImplementedError

    @abstractmethod
    def create_fact(
        self, text: str, source: str, category: Union[Category, str]
    ) -> FactResponse:
        raise NotImplementedError

    @abstractmethod
    def update_votes(self, fact_id: int, vote: VoteType, value: int) -> FactResponse:
        """Set one vote column to ``value`` and return the updated fact."""
        raise NotImplementedError

    @abstractmethod
    def count_facts(self) -> int:
        raise NotImplementedError

    def close(self):
        pass


# =============================================================================
# SQLAlchemy Store
# =============================================================================


class SqlFactStore(FactStore):
    """Store backed by a SQLAlchemy session."""

    backend = "sql"

    def __init__(self, db: Session):
        self.db = db

    def list_facts(self, category=None, limit=DEFAULT_LIMIT):
        try:
            query = self.db.query(Fact)
            if category:
                query = query.filter(Fact.category == _category_value(category))
            facts = query.order_by(Fact.votes_interesting.desc()).limit(limit).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list facts: {e}")
            raise StoreError("Failed to list facts") from e

        return [_fact_to_response(f) for f in facts]

    def get_fact(self, fact_id):
        try:
            fact = self.db.query(Fact).filter(Fact.id == fact_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load fact {fact_id}: {e}")
            raise StoreError(f"Failed to load fact {fact_id}") from e

        return _fact_to_response(fact) if fact else None

    def create_fact(self, text, source, category):
        fact = Fact(text=text, source=source, category=_category_value(category))
        try:
            self.db.add(fact)
            self.db.commit()
            self.db.refresh(fact)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create fact: {e}")
            raise StoreError("Failed to create fact") from e

        logger.info(f"Created fact {fact.id} in {fact.category}")
        return _fact_to_response(fact)

    def update_votes(self, fact_id, vote, value):
        try:
            fact = self.db.query(Fact).filter(Fact.id == fact_id).first()
            if not fact:
                raise FactNotFoundError(fact_id)
            setattr(fact, vote.attribute, value)
            self.db.commit()
            self.db.refresh(fact)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update votes on fact {fact_id}: {e}")
            raise StoreError(f"Failed to update fact {fact_id}") from e

        return _fact_to_response(fact)

    def count_facts(self):
        try:
            return self.db.query(Fact).count()
        except SQLAlchemyError as e:
            raise StoreError("Failed to count facts") from e


def _fact_to_response(fact: Fact) -> FactResponse:
    """Convert database Fact to response model."""
    return FactResponse(
        id=fact.id,
        text=fact.text,
        source=fact.source,
        category=fact.category,
        votes_interesting=fact.votes_interesting,
        votes_mindblowing=fact.votes_mindblowing,
        votes_false=fact.votes_false,
        created_at=fact.created_at
    )


# =============================================================================
# REST Store
# =============================================================================


class RestFactStore(FactStore):
    """
    Store backed by a hosted PostgREST table (e.g. Supabase).

    Filters, ordering and limits are passed as PostgREST query
    parameters; writes ask for the stored rows back with
    ``Prefer: return=representation``.
    """

    backend = "rest"
    TABLE = "fact"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        headers = {}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"

        self.client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RestFactStore":
        return cls(
            settings.supabase_url,
            api_key=settings.supabase_key,
            timeout=settings.store_timeout_seconds,
        )

    def close(self):
        self.client.close()

    def _request(
        self,
        method: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> httpx.Response:
        headers = {"Prefer": prefer} if prefer else None
        try:
            response = self.client.request(
                method, f"/{self.TABLE}", params=params, json=json, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                f"Store returned {exc.response.status_code} for {method}: "
                f"{exc.response.text}"
            )
            raise StoreError(f"Store returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error(f"Failed to contact the store: {exc}")
            raise StoreError("Failed to contact the store") from exc
        return response

    def _rows(self, response: httpx.Response) -> List[FactResponse]:
        try:
            return [FactResponse.model_validate(row) for row in response.json()]
        except (ValueError, TypeError, ValidationError) as exc:
            raise StoreError("Store returned malformed rows") from exc

    def list_facts(self, category=None, limit=DEFAULT_LIMIT):
        params = {
            "select": "*",
            "order": f"{VoteType.INTERESTING.column}.desc",
            "limit": limit,
        }
        if category:
            params["category"] = f"eq.{_category_value(category)}"
        return self._rows(self._request("GET", params=params))

    def get_fact(self, fact_id):
        rows = self._rows(
            self._request("GET", params={"select": "*", "id": f"eq.{fact_id}"})
        )
        return rows[0] if rows else None

    def create_fact(self, text, source, category):
        rows = self._rows(self._request(
            "POST",
            json=[{
                "text": text,
                "source": source,
                "category": _category_value(category),
            }],
            prefer="return=representation",
        ))
        if not rows:
            raise StoreError("Store did not return the created fact")
        logger.info(f"Created fact {rows[0].id} in {rows[0].category}")
        return rows[0]

    def update_votes(self, fact_id, vote, value):
        rows = self._rows(self._request(
            "PATCH",
            params={"id": f"eq.{fact_id}"},
            json={vote.column: value},
            prefer="return=representation",
        ))
        if not rows:
            raise FactNotFoundError(fact_id)
        return rows[0]

    def count_facts(self):
        response = self._request("HEAD", params={"select": "id"}, prefer="count=exact")
        content_range = response.headers.get("content-range", "")
        _, _, total = content_range.partition("/")
        if not total.isdigit():
            raise StoreError(f"Store returned no count: {content_range!r}")
        return int(total)


# =============================================================================
# Dependency
# =============================================================================


def get_store():
    """Dependency yielding the configured store, closed after the request."""
    settings = get_settings()

    if settings.uses_hosted_store:
        store = RestFactStore.from_settings(settings)
        try:
            yield store
        finally:
            store.close()
    else:
        db = SessionLocal()
        try:
            yield SqlFactStore(db)
        finally:
            db.close()

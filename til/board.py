"""
View state for the fact board.

A FactBoard holds what the reader currently sees (the loaded facts, the
selected category, whether the share form is open, the form draft) and
keeps it consistent with writes made through a FactStore:
- loading replaces the fact list
- sharing a fact prepends the stored record
- voting swaps in the updated record

Each operation has its own in-flight flag. There is no retrying,
caching or conflict handling.
"""

import logging
from typing import List, Optional, Set

from til.models import (
    ALERT_MESSAGE, ALL_CATEGORIES, FactDraft, FactResponse, VoteType,
    parse_category_filter
)
from til.store import DEFAULT_LIMIT, FactStore, StoreError


logger = logging.getLogger(__name__)


class BoardBusyError(Exception):
    """An operation was started while the same operation is in flight."""


class FactBoard:
    """Local board state synchronized with a FactStore."""

    def __init__(self, store: FactStore, fact_limit: int = DEFAULT_LIMIT):
        self.store = store
        self.fact_limit = fact_limit

        self.facts: List[FactResponse] = []
        self.current_category: str = ALL_CATEGORIES
        self.show_form = False
        self.draft = FactDraft()

        self.is_loading = False
        self.is_uploading = False
        self.updating: Set[int] = set()

        # Last message to show the reader
        self.error: Optional[str] = None

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self, category: str = ALL_CATEGORIES) -> List[FactResponse]:
        """
        Load the facts for ``category`` (``all`` for every category).

        On failure the previous facts stay and the alert is set.
        Raises ValueError for an unknown category.
        """
        if self.is_loading:
            raise BoardBusyError("Facts are already loading")

        category_filter = parse_category_filter(category)
        self.current_category = category_filter.value if category_filter else ALL_CATEGORIES

        self.is_loading = True
        try:
            self.facts = self.store.list_facts(category_filter, limit=self.fact_limit)
        except StoreError as e:
            logger.warning(f"Could not load facts for {self.current_category}: {e}")
            self.error = ALERT_MESSAGE
        finally:
            self.is_loading = False

        return self.facts

    # =========================================================================
    # Sharing
    # =========================================================================

    def toggle_form(self) -> bool:
        self.show_form = not self.show_form
        return self.show_form

    def submit(self, draft: Optional[FactDraft] = None) -> Optional[FactResponse]:
        """
        Share the draft.

        Invalid drafts are ignored and leave the board untouched. Otherwise
        the form is reset and closed whether or not the store accepted it.
        """
        if draft is not None:
            self.draft = draft
        if not self.draft.is_valid:
            return None

        if self.is_uploading:
            raise BoardBusyError("A fact is already being shared")

        new_fact = None
        self.is_uploading = True
        try:
            new_fact = self.store.create_fact(
                self.draft.text, self.draft.source, self.draft.category
            )
        except StoreError as e:
            logger.warning(f"Could not share fact: {e}")
            self.error = ALERT_MESSAGE
        finally:
            self.is_uploading = False

        if new_fact is not None:
            self.facts = [new_fact] + self.facts

        self.draft = FactDraft()
        self.show_form = False
        return new_fact

    # =========================================================================
    # Voting
    # =========================================================================

    def get(self, fact_id: int) -> Optional[FactResponse]:
        for fact in self.facts:
            if fact.id == fact_id:
                return fact
        return None

    def vote(self, fact_id: int, vote: VoteType) -> Optional[FactResponse]:
        """
        Add one vote to a fact on the board.

        The new count is the board's count plus one. Raises LookupError when
        the fact is not on the board; store failures leave the board as is.
        """
        fact = self.get(fact_id)
        if fact is None:
            raise LookupError(f"Fact {fact_id} is not on the board")

        if fact_id in self.updating:
            raise BoardBusyError(f"A vote on fact {fact_id} is already in flight")

        self.updating.add(fact_id)
        try:
            updated = self.store.update_votes(fact_id, vote, fact.votes_for(vote) + 1)
        except StoreError as e:
            logger.warning(f"Vote {vote.value} on fact {fact_id} failed: {e}")
            return None
        finally:
            self.updating.discard(fact_id)

        self.facts = [updated if f.id == fact_id else f for f in self.facts]
        return updated

    def is_updating(self, fact_id: int) -> bool:
        return fact_id in self.updating

"""
Pydantic models for the Today I Learned board.

Categories, vote types, the fact record as stored in the ``fact`` table,
and the request/response models for the JSON API.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import (
    BaseModel, Field, HttpUrl, TypeAdapter, ValidationError,
    computed_field, field_validator
)


MAX_FACT_LENGTH = 200

# Pseudo-category meaning "no filter"
ALL_CATEGORIES = "all"

ALERT_MESSAGE = "An error occurred. Please try again later."


# =============================================================================
# Enums
# =============================================================================


class Category(str, Enum):
    """Categories a fact can be tagged with."""
    TECHNOLOGY = "technology"
    SCIENCE = "science"
    FINANCE = "finance"
    SOCIETY = "society"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    HISTORY = "history"
    NEWS = "news"


CATEGORY_COLORS: Dict[Category, str] = {
    Category.TECHNOLOGY: "#3b82f6",
    Category.SCIENCE: "#16a34a",
    Category.FINANCE: "#ef4444",
    Category.SOCIETY: "#eab308",
    Category.ENTERTAINMENT: "#db2777",
    Category.HEALTH: "#14b8a6",
    Category.HISTORY: "#f97316",
    Category.NEWS: "#8b5cf6",
}


class VoteType(str, Enum):
    """Ways a reader can vote on a fact."""
    INTERESTING = "interesting"
    MINDBLOWING = "mindblowing"
    FALSE = "false"

    @property
    def attribute(self) -> str:
        """Attribute name on FactResponse / the ORM model."""
        return f"votes_{self.value}"

    @property
    def column(self) -> str:
        """Column name in the hosted ``fact`` table."""
        return f"votes{self.value.capitalize()}"


VOTE_ICONS: Dict[VoteType, str] = {
    VoteType.INTERESTING: "👍",
    VoteType.MINDBLOWING: "🤯",
    VoteType.FALSE: "⛔️",
}


# =============================================================================
# Helpers
# =============================================================================


_http_url = TypeAdapter(HttpUrl)


def fact_length(text: str) -> int:
    """Length in UTF-16 code units, as browsers report it for form input."""
    return len(text.encode("utf-16-le")) // 2


def is_valid_http_url(value: str) -> bool:
    """True when value is an absolute http(s) URL."""
    try:
        _http_url.validate_python(value)
    except ValidationError:
        return False
    return True


def category_color(name: str) -> Optional[str]:
    """Color for a category name, None for unknown names."""
    try:
        return CATEGORY_COLORS[Category(name)]
    except ValueError:
        return None


def parse_category_filter(name: Optional[str]) -> Optional[Category]:
    """
    Turn a board filter into a store filter.

    ``all`` (or nothing) means no filter. Unknown names raise ValueError.
    """
    if not name or name == ALL_CATEGORIES:
        return None
    return Category(name)


# =============================================================================
# Board Models
# =============================================================================


class FactDraft(BaseModel):
    """What the user has typed into the share form so far."""

    text: str = ""
    source: str = ""
    category: str = ""

    @property
    def remaining_chars(self) -> int:
        return MAX_FACT_LENGTH - fact_length(self.text)

    def validation_errors(self) -> List[str]:
        errors = []
        if not self.text:
            errors.append("Write a fact to share.")
        elif fact_length(self.text) > MAX_FACT_LENGTH:
            errors.append(f"Facts can be at most {MAX_FACT_LENGTH} characters.")
        if not is_valid_http_url(self.source):
            errors.append("The source must be an http(s) URL.")
        if category_color(self.category) is None:
            errors.append("Choose a category.")
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors()


# =============================================================================
# Request Models
# =============================================================================


class CreateFactRequest(BaseModel):
    """Request to share a new fact."""

    text: str = Field(
        ...,
        min_length=1,
        description="The fact itself"
    )
    source: str = Field(..., description="Trustworthy source (http/https URL)")
    category: Category = Field(..., description="Category the fact belongs to")

    @field_validator('text')
    @classmethod
    def validate_text(cls, v):
        """Ensure the fact fits, counted the way the browser counts."""
        if fact_length(v) > MAX_FACT_LENGTH:
            raise ValueError(f'Facts can be at most {MAX_FACT_LENGTH} characters')
        return v

    @field_validator('source')
    @classmethod
    def validate_source(cls, v):
        """Ensure the source is an http(s) URL."""
        if not is_valid_http_url(v):
            raise ValueError(f'Invalid URL: {v}')
        return v


class VoteRequest(BaseModel):
    """Request to vote on a fact."""

    vote: VoteType


# =============================================================================
# Response Models
# =============================================================================


class FactResponse(BaseModel):
    """
    A single fact.

    Vote counts use the hosted table's column names on the wire
    (``votesInteresting`` etc.) so rows from the REST store validate as-is.
    """

    id: int
    text: str
    source: str
    category: str

    votes_interesting: int = Field(default=0, alias="votesInteresting")
    votes_mindblowing: int = Field(default=0, alias="votesMindblowing")
    votes_false: int = Field(default=0, alias="votesFalse")

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True

    @computed_field
    @property
    def is_disputed(self) -> bool:
        return self.votes_interesting + self.votes_mindblowing < self.votes_false

    @property
    def color(self) -> Optional[str]:
        return category_color(self.category)

    def votes_for(self, vote: VoteType) -> int:
        return getattr(self, vote.attribute)


class CategoryResponse(BaseModel):
    """A category and its display color."""

    name: Category
    color: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    store: str
    store_connected: bool
    facts_count: int = 0

"""
Prompt store models.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .enums import PromptDomain
from .scoring import QualityScore


class SaveMetadata(BaseModel):
    """Caller-supplied metadata for a saved prompt."""
    name: str = Field(..., min_length=1, max_length=200)
    domain: PromptDomain = PromptDomain.GENERAL
    description: Optional[str] = Field(default=None, max_length=1000)
    tags: List[str] = Field(default_factory=list)
    is_public: bool = False
    author_id: Optional[str] = None

    model_config = {"frozen": True}


class SavedPrompt(BaseModel):
    """A prompt persisted in the store."""
    id: str
    name: str
    prompt: str
    original: str
    system_prompt: Optional[str] = None
    domain: PromptDomain
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    score: QualityScore
    created_at: datetime
    updated_at: datetime
    usage_count: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class SearchParams(BaseModel):
    """Filters, sorting and paging for store search."""
    query: Optional[str] = None
    domain: Optional[PromptDomain] = None
    tags: List[str] = Field(default_factory=list)
    min_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    sort_by: Literal["score", "created", "updated", "usage"] = "score"
    sort_order: Literal["asc", "desc"] = "desc"
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class SearchResult(BaseModel):
    """A search hit with its relevance in [0, 1]."""
    prompt: SavedPrompt
    relevance: float = Field(ge=0.0, le=1.0)

    model_config = {"frozen": True}


class SearchPage(BaseModel):
    """One page of search results plus the total number of matches."""
    results: List[SearchResult] = Field(default_factory=list)
    total: int = Field(ge=0)

    model_config = {"frozen": True}


class StoreStats(BaseModel):
    """Aggregate statistics over stored prompts."""
    total_prompts: int = 0
    average_score: float = 0.0
    domain_distribution: Dict[str, int] = Field(default_factory=dict)
    tag_distribution: Dict[str, int] = Field(default_factory=dict)
    quality_distribution: Dict[str, int] = Field(
        default_factory=lambda: {"excellent": 0, "good": 0, "average": 0, "poor": 0}
    )

    model_config = {"frozen": True}

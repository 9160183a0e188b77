"""
API request and response models.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .enums import PromptDomain
from .pipeline_version import PipelineVersion
from .process import ProcessInput
from .store import SaveMetadata


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(description="Service health status", examples=["healthy"])
    version: str = Field(description="API version", examples=["1.0.0"])
    uptime_seconds: float = Field(description="Service uptime in seconds", examples=[3600.5])
    cache_available: bool = Field(default=True, description="Cache backend answered ping")
    store_available: bool = Field(default=True, description="Prompt store answered ping")


class VersionResponse(BaseModel):
    """Response for version endpoint."""

    api_version: str = Field(description="API version", examples=["1.0.0"])
    pipeline_version: PipelineVersion = Field(description="Current pipeline version")


class EvaluateRequest(BaseModel):
    """Request model for prompt evaluation."""

    prompt: str = Field(..., min_length=1, description="Prompt to evaluate")
    domain: Optional[PromptDomain] = Field(default=None, description="Domain (detected when omitted)")
    criteria: List[str] = Field(default_factory=list, description="Optional evaluation criteria")


class CompareRequest(BaseModel):
    """Request model for variant comparison."""

    prompts: List[str] = Field(..., description="Two or more prompt variants")
    test_input: Optional[str] = Field(default=None, description="Optional sample input")
    domain: Optional[PromptDomain] = None


class SaveRequest(BaseModel):
    """Request model for saving a refined prompt."""

    input: ProcessInput = Field(..., description="Prompt to refine and save")
    metadata: SaveMetadata


class DomainInfo(BaseModel):
    """Rule engine statistics for one domain."""

    domain: str
    description: str
    rule_count: int
    pattern_count: int
    example_count: int


class DomainsResponse(BaseModel):
    """Response for the domain listing endpoint."""

    domains: List[DomainInfo]
    weights: Dict[str, Dict[str, float]] = Field(default_factory=dict)

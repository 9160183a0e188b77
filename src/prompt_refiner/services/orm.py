"""
SQLAlchemy models for the prompt store.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, Float, Index, Integer, String, Text, TIMESTAMP
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PromptRecord(Base):
    """
    A saved (refined) prompt with its score.

    Score dimensions are stored as columns so search can filter and sort
    on overall score in SQL.
    """

    __tablename__ = "prompts"

    id = Column(String(36), primary_key=True)  # UUID
    name = Column(String(200), nullable=False)
    prompt = Column(Text, nullable=False)  # Refined text
    original = Column(Text, nullable=False)
    system_prompt = Column(Text, nullable=True)
    domain = Column(String(32), nullable=False)
    description = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    is_public = Column(Boolean, default=False)
    author_id = Column(String, nullable=True)

    # Quality score
    clarity = Column(Float, nullable=False)
    specificity = Column(Float, nullable=False)
    structure = Column(Float, nullable=False)
    completeness = Column(Float, nullable=False)
    overall = Column(Float, nullable=False)

    usage_count = Column(Integer, default=0)
    extra = Column("metadata", JSON, nullable=False, default=dict)

    created_at = Column(TIMESTAMP(timezone=True), default=_utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("idx_prompt_domain", "domain"),
        Index("idx_prompt_overall", "overall"),
        Index("idx_prompt_created", "created_at"),
    )

    def __repr__(self):
        return f"<PromptRecord(id={self.id}, name={self.name}, domain={self.domain})>"

"""
Application configuration management.

This module handles configuration from environment variables using Pydantic Settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application configuration from environment variables.

    All settings can be overridden via environment variables with the same name.
    """

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 4

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Monitoring
    enable_metrics: bool = True

    # Analyzer
    max_input_length: int = 10000  # Longer input is rejected at the boundary, truncated in the analyzer
    spacy_model_name: str = "en_core_web_sm"
    analyzer_use_spacy: bool = True  # False forces the regex tokenizer

    # Validator thresholds
    validator_min_length: int = 10
    validator_max_length: int = 5000
    validator_ambiguity_error: float = 0.7
    validator_ambiguity_warning: float = 0.4
    validator_min_readability: float = 0.3
    validator_redundancy_threshold: int = 3  # Same content lemma more than N times

    # Scoring
    score_tie_threshold: float = 0.05
    score_fallback_value: float = 0.5
    score_weight_clarity: float = 0.25
    score_weight_specificity: float = 0.25
    score_weight_structure: float = 0.25
    score_weight_completeness: float = 0.25

    # Cache
    cache_enabled: bool = True
    cache_ttl_seconds: int = 3600
    cache_max_entries: int = 1000
    cache_key_prefix: str = "promptsmith:"

    # Pipeline
    pipeline_timeout_seconds: float = 10.0
    max_suggestions: int = 5

    # Prompt store
    store_db_url: str = "sqlite:///./prompt_refiner.db"
    store_db_echo_sql: bool = False

    # Search relevance weights
    store_relevance_base: float = 0.5
    store_relevance_quality_weight: float = 0.3
    store_relevance_query_weight: float = 0.1
    store_relevance_query_cap: float = 0.3
    store_relevance_tag_weight: float = 0.2

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


# Global settings instance
settings = Settings()

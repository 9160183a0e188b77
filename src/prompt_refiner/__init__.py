"""
prompt_refiner: heuristic prompt refinement pipeline.

Turns an informally written instruction into a structured, domain-appropriate
prompt with a multi-dimensional quality score:

    analysis -> domain rules -> validation -> scoring -> cache/orchestration
"""

from .version import API_VERSION

__version__ = API_VERSION

__all__ = ["__version__"]

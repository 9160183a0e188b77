"""
CLI module for prompt refinement.

Provides command-line tools for one-shot refinement.
"""

from prompt_refiner.cli.refine import main as refine_main

__all__ = ["refine_main"]

"""LLM prompts."""

from app.domain.prompts.analysis import build_analysis_prompt

__all__ = ["build_analysis_prompt"]

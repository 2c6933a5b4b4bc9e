"""Domain services."""

from app.domain.services.analysis_cache import AnalysisCache, AnalysisCacheConfig, AnalysisOutcome
from app.domain.services.transcript_providers import build_transcript_provider

__all__ = ["AnalysisCache", "AnalysisCacheConfig", "AnalysisOutcome", "build_transcript_provider"]

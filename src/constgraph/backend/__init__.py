"""Access to the constant analysis backend."""

from constgraph.backend.analysis_client import AnalysisClient, AnalysisServiceError

__all__ = ["AnalysisClient", "AnalysisServiceError"]

from typing import Optional

from fastapi import HTTPException, Request, status

from ringside.pipelines.analyze_mentions import AnalysisPipeline
from ringside.services.storage.metrics_store import MetricsStore


def get_pipeline(request: Request) -> AnalysisPipeline:
    """Analysis pipeline created at application startup."""
    pipeline: Optional[AnalysisPipeline] = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analysis pipeline not ready"
        )
    return pipeline


def get_metrics_store(request: Request) -> MetricsStore:
    """Metrics store backing the pipeline."""
    pipeline = get_pipeline(request)
    if pipeline.store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Metrics store not configured"
        )
    return pipeline.store

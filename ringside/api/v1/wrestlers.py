from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ringside.api.deps import get_metrics_store, get_pipeline
from ringside.pipelines.analyze_mentions import AnalysisPipeline
from ringside.schemas.wrestler import (
    AnalysisResponse,
    LeaderboardResponse,
    MetricsSnapshotItem,
    RefreshResponse,
    WrestlerAnalysis,
    WrestlerHistoryResponse,
)
from ringside.services.filtering.filters import filter_wrestlers_by_promotion
from ringside.services.scoring.ranking import get_top_push_wrestlers, get_worst_buried_wrestlers
from ringside.services.storage.metrics_store import MetricsStore

router = APIRouter()


@router.get("/analysis", response_model=AnalysisResponse)
async def get_analysis(
    promotion: Optional[str] = Query(None, description="Promotion substring, or 'all'"),
    limit: int = Query(100, ge=1, le=500),
    pipeline: AnalysisPipeline = Depends(get_pipeline)
):
    """Latest per-wrestler analysis, most mentioned first."""
    results = filter_wrestlers_by_promotion(pipeline.results, promotion)

    return AnalysisResponse(
        items=results[:limit],
        total=len(results),
        content_items=pipeline.content_count,
        updated_at=pipeline.updated_at
    )


@router.get("/top-push", response_model=LeaderboardResponse)
async def get_top_push(
    promotion: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=50),
    pipeline: AnalysisPipeline = Depends(get_pipeline)
):
    """Wrestlers currently getting a push."""
    results = filter_wrestlers_by_promotion(pipeline.results, promotion)

    return LeaderboardResponse(
        board="push",
        items=get_top_push_wrestlers(results, limit=limit),
        updated_at=pipeline.updated_at
    )


@router.get("/worst-buried", response_model=LeaderboardResponse)
async def get_worst_buried(
    promotion: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=50),
    pipeline: AnalysisPipeline = Depends(get_pipeline)
):
    """Wrestlers currently being buried."""
    results = filter_wrestlers_by_promotion(pipeline.results, promotion)

    return LeaderboardResponse(
        board="burial",
        items=get_worst_buried_wrestlers(results, limit=limit),
        updated_at=pipeline.updated_at
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_analysis(pipeline: AnalysisPipeline = Depends(get_pipeline)):
    """Fetch fresh content and recompute the analysis."""
    results = await pipeline.refresh()

    return RefreshResponse(
        status="ok",
        wrestlers_analyzed=len(results),
        updated_at=pipeline.updated_at
    )


@router.get("/{wrestler_id}/history", response_model=WrestlerHistoryResponse)
async def get_wrestler_history(
    wrestler_id: str,
    limit: int = Query(20, ge=1, le=200),
    store: MetricsStore = Depends(get_metrics_store)
):
    """Persisted metric snapshots of a wrestler, newest first."""
    snapshots = store.get_history(wrestler_id, limit=limit)

    return WrestlerHistoryResponse(
        wrestler_id=wrestler_id,
        items=[MetricsSnapshotItem.model_validate(s) for s in snapshots]
    )


@router.get("/{wrestler_id}", response_model=WrestlerAnalysis)
async def get_wrestler(wrestler_id: str, pipeline: AnalysisPipeline = Depends(get_pipeline)):
    """Latest analysis of a single wrestler."""
    analysis = pipeline.get_wrestler(wrestler_id)
    if analysis is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No analysis for wrestler '{wrestler_id}'"
        )
    return analysis

from fastapi import APIRouter, Depends

from ..services import Pipeline, get_pipeline

router = APIRouter(tags=["health"])


@router.get("/health")
def health(pipeline: Pipeline = Depends(get_pipeline)):
	return {"status": "ok", "mock_ai": pipeline.mock}

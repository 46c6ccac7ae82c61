from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
	return {"status": "ok", "message": "API is running"}


@router.get("/healthz")
def healthz():
	return "ok"

"""Health check endpoints.

- /health: Basic health check
- /health/ready: Readiness probe (is the permission policy loaded?)
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    return {"status": "healthy", "version": request.app.version}


@router.get("/health/ready")
async def readiness_probe(request: Request):
    policy = getattr(request.app.state, "rbac_policy", None)
    if policy is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready"},
        )
    return {"status": "ready", "roles": len(policy.config.roles)}

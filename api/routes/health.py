import time
from datetime import UTC, datetime

from fastapi import APIRouter

from api.schemas import HealthResponse

router = APIRouter(prefix='/api', tags=['health'])

STARTED_AT = time.monotonic()


@router.get('/health', response_model=HealthResponse, summary='Liveness check')
async def health_check() -> HealthResponse:
	return HealthResponse(
		status='ok',
		timestamp=datetime.now(tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
		uptime=round(time.monotonic() - STARTED_AT, 3),
	)

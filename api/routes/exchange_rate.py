from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_rate_resolver
from api.schemas import ErrorResponse, ExchangeRateData, ExchangeRateResponse
from application.services import RateResolver
from application.services.currency_service import validate_currency_pair

router = APIRouter(prefix='/api', tags=['exchange-rate'])


def to_iso8601(epoch_ms: int) -> str:
	moment = datetime.fromtimestamp(epoch_ms / 1000, tz=UTC)
	return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@router.get(
	'/exchange-rate',
	response_model=ExchangeRateResponse,
	status_code=status.HTTP_200_OK,
	summary='Get exchange rate with provider fallback and caching',
	responses={400: {'model': ErrorResponse}, 500: {'model': ErrorResponse}},
)
async def get_exchange_rate(
	resolver: Annotated[RateResolver, Depends(get_rate_resolver)],
	from_currency: Annotated[str, Query(alias='from')] = 'USD',
	to_currency: Annotated[str, Query(alias='to')] = 'CNY',
) -> ExchangeRateResponse:
	validate_currency_pair(from_currency, to_currency)

	result = await resolver.resolve(from_currency, to_currency)
	return ExchangeRateResponse(
		data=ExchangeRateData(
			base=from_currency,
			target=to_currency,
			rate=result.rate,
			timestamp=to_iso8601(result.timestamp),
			source=result.source_name,
			from_cache=result.degraded,
		)
	)

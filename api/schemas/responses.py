from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExchangeRateData(_CamelModel):
	base: str = Field(..., description='Source currency code')
	target: str = Field(..., description='Target currency code')
	rate: float = Field(..., description='Units of target per unit of base')
	timestamp: str = Field(..., description='When the rate was fetched (ISO-8601)')
	source: str = Field(..., description='Provider that supplied the rate, or "direct"')
	from_cache: bool = Field(..., description='True when served from a stale cache after all providers failed')


class ExchangeRateResponse(_CamelModel):
	success: bool = True
	data: ExchangeRateData

	model_config = ConfigDict(
		alias_generator=to_camel,
		populate_by_name=True,
		json_schema_extra={
			'example': {
				'success': True,
				'data': {
					'base': 'USD',
					'target': 'CNY',
					'rate': 7.1999,
					'timestamp': '2025-09-27T10:30:00.000Z',
					'source': 'open.er-api.com',
					'fromCache': False,
				},
			}
		},
	)


class RemainingValueData(_CamelModel):
	remaining_value: float
	used_value: float
	remaining_days: float
	usage_rate: float
	daily_rate: float


class CycleRemainingValueData(RemainingValueData):
	total_days: int
	used_days: int
	purchase_date: str
	cycle: str


class CalculateResponse(_CamelModel):
	success: bool = True
	data: RemainingValueData


class CalculateByCycleResponse(_CamelModel):
	success: bool = True
	data: CycleRemainingValueData


class HealthResponse(BaseModel):
	status: str = 'ok'
	timestamp: str
	uptime: float


class ErrorResponse(BaseModel):
	success: bool = False
	error: str

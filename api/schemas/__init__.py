from .requests import CalculateByCycleRequest, CalculateRequest
from .responses import (
	CalculateByCycleResponse,
	CalculateResponse,
	CycleRemainingValueData,
	ErrorResponse,
	ExchangeRateData,
	ExchangeRateResponse,
	HealthResponse,
	RemainingValueData,
)

__all__ = [
	'CalculateByCycleRequest',
	'CalculateRequest',
	'CalculateByCycleResponse',
	'CalculateResponse',
	'CycleRemainingValueData',
	'ErrorResponse',
	'ExchangeRateData',
	'ExchangeRateResponse',
	'HealthResponse',
	'RemainingValueData',
]

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from api.schemas import (
	CalculateByCycleRequest,
	CalculateByCycleResponse,
	CalculateRequest,
	CalculateResponse,
	CycleRemainingValueData,
	ErrorResponse,
	RemainingValueData,
)
from application.services import valuation_service
from infrastructure.rendering.badge import build_badge_svg

router = APIRouter(prefix='/api', tags=['valuation'])

NO_CACHE = {'Cache-Control': 'no-cache'}


@router.post(
	'/calculate',
	response_model=CalculateResponse,
	status_code=status.HTTP_200_OK,
	summary='Calculate the remaining value of a prepaid subscription',
	responses={400: {'model': ErrorResponse}},
)
async def calculate(request: CalculateRequest) -> CalculateResponse:
	result = valuation_service.calculate_remaining_value(
		request.total_cost, request.total_days, request.used_days
	)
	return CalculateResponse(data=RemainingValueData(**vars(result)))


@router.post(
	'/calculate-by-cycle',
	response_model=CalculateByCycleResponse,
	status_code=status.HTTP_200_OK,
	summary='Calculate remaining value from billing cycle and purchase date',
	responses={400: {'model': ErrorResponse}},
)
async def calculate_by_cycle(request: CalculateByCycleRequest) -> CalculateByCycleResponse:
	total_days = valuation_service.days_by_cycle(request.cycle)
	used_days = valuation_service.used_days_since(request.purchase_date)
	result = valuation_service.calculate_remaining_value(request.total_cost, total_days, used_days)

	return CalculateByCycleResponse(
		data=CycleRemainingValueData(
			**vars(result),
			total_days=total_days,
			used_days=used_days,
			purchase_date=request.purchase_date,
			cycle=request.cycle,
		)
	)


@router.get(
	'/badge.svg',
	status_code=status.HTTP_200_OK,
	summary='Render the remaining value as an SVG badge',
	response_class=Response,
	responses={200: {'content': {'image/svg+xml': {}}}, 400: {'model': ErrorResponse}},
)
async def badge(
	start_date: Annotated[str | None, Query(alias='startDate')] = None,
	end_date: Annotated[str | None, Query(alias='endDate')] = None,
	total_cost: Annotated[str | None, Query(alias='totalCost')] = None,
	currency: str = 'CNY',
	remaining_value: Annotated[str | None, Query(alias='remainingValue')] = None,
	total_days: Annotated[str | None, Query(alias='totalDays')] = None,
	source: str | None = None,
) -> Response:
	data = valuation_service.build_badge_data(
		start_date=start_date,
		end_date=end_date,
		total_cost=total_cost,
		currency=currency,
		remaining_value=remaining_value,
		total_days=total_days,
		source=source,
	)
	return Response(content=build_badge_svg(data), media_type='image/svg+xml', headers=NO_CACHE)

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CalculateRequest(BaseModel):
	total_cost: float = Field(..., description='Total prepaid cost')
	total_days: float = Field(..., description='Length of the subscription in days')
	used_days: float = Field(..., description='Days already used')

	model_config = ConfigDict(
		alias_generator=to_camel,
		populate_by_name=True,
		json_schema_extra={'example': {'totalCost': 120, 'totalDays': 365, 'usedDays': 100}},
	)


class CalculateByCycleRequest(BaseModel):
	total_cost: float = Field(..., description='Total prepaid cost')
	cycle: str = Field(..., min_length=1, description='monthly, yearly, biennial or triennial')
	purchase_date: str = Field(..., min_length=1, description='ISO-8601 purchase date')

	model_config = ConfigDict(
		alias_generator=to_camel,
		populate_by_name=True,
		json_schema_extra={
			'example': {'totalCost': 120, 'cycle': 'yearly', 'purchaseDate': '2025-01-01'}
		},
	)

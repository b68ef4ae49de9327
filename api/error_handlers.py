import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.exceptions.currency import InvalidCurrencyError, NoRateAvailableError
from domain.exceptions.valuation import RenderError, ValuationError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
	return JSONResponse(status_code=status_code, content={'success': False, 'error': message})


def _describe_validation_error(exc: RequestValidationError) -> str:
	errors = exc.errors()
	if not errors:
		return 'Invalid request'
	first = errors[0]
	location = '.'.join(str(part) for part in first.get('loc', ()) if part not in ('body', 'query'))
	message = first.get('msg', 'invalid value')
	return f'{location}: {message}' if location else message


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidCurrencyError)
	async def invalid_currency_handler(request: Request, exc: InvalidCurrencyError):
		return error_response(400, str(exc))

	@app.exception_handler(NoRateAvailableError)
	async def no_rate_handler(request: Request, exc: NoRateAvailableError):
		logger.error(f'Exchange rate unavailable: {exc}')
		return error_response(500, str(exc))

	@app.exception_handler(ValuationError)
	async def valuation_error_handler(request: Request, exc: ValuationError):
		return error_response(400, str(exc))

	@app.exception_handler(RenderError)
	async def render_error_handler(request: Request, exc: RenderError):
		if exc.status_code >= 500:
			logger.error(f'Render error on {request.url.path}: {exc}')
		return error_response(exc.status_code, str(exc))

	@app.exception_handler(RequestValidationError)
	async def request_validation_handler(request: Request, exc: RequestValidationError):
		return error_response(400, _describe_validation_error(exc))

	@app.exception_handler(StarletteHTTPException)
	async def http_exception_handler(request: Request, exc: StarletteHTTPException):
		message = 'Not found' if exc.status_code == 404 else str(exc.detail)
		return error_response(exc.status_code, message)

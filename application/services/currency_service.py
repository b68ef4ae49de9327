from domain.exceptions.currency import InvalidCurrencyError
from domain.models.currency import SUPPORTED_CURRENCIES


def validate_currency(code: str) -> None:
	if code not in SUPPORTED_CURRENCIES:
		raise InvalidCurrencyError(
			f"Unsupported currency '{code}'. Supported currencies: {', '.join(SUPPORTED_CURRENCIES)}"
		)


def validate_currency_pair(from_currency: str, to_currency: str) -> None:
	validate_currency(from_currency)
	validate_currency(to_currency)

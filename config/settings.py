from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Application
	APP_NAME: str = 'VPS Value Service'
	DEBUG: bool = False
	HOST: str = '0.0.0.0'
	PORT: int = 3000

	# Logging
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False

	# Exchange rates
	RATE_CACHE_TTL_SECONDS: int = 3600
	PROVIDER_TIMEOUT_SECONDS: float = 5.0
	RATE_SINGLE_FLIGHT: bool = True
	RATE_PROVIDERS: str = 'exchangerate-api.com,open.er-api.com,api.frankfurter.app'

	# Cache backend: 'memory' (per process) or 'redis' (shared)
	CACHE_BACKEND: str = 'memory'
	REDIS_URL: str = 'redis://localhost:6379'

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')

	@field_validator('CACHE_BACKEND')
	@classmethod
	def known_cache_backend(cls, v: str) -> str:
		v = v.lower()
		if v not in ('memory', 'redis'):
			raise ValueError(f"Unsupported CACHE_BACKEND '{v}'. Allowed values: memory, redis")
		return v

	@field_validator('RATE_CACHE_TTL_SECONDS')
	@classmethod
	def positive_ttl(cls, v: int) -> int:
		if v <= 0:
			raise ValueError('RATE_CACHE_TTL_SECONDS must be positive')
		return v

	@property
	def provider_names(self) -> list[str]:
		return [name.strip() for name in self.RATE_PROVIDERS.split(',') if name.strip()]


@lru_cache
def get_settings() -> Settings:
	return Settings()

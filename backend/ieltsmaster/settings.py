from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Serve canned questions and randomized scores instead of calling the completion service
	use_mock_ai: bool = Field(default=False, validation_alias="USE_MOCK_AI")

	# OpenAI-compatible chat completions endpoint
	openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
	openai_base_url: str = Field(default="https://api.openai.com/v1", validation_alias="OPENAI_BASE_URL")
	openai_model: str = Field(default="gpt-4o-mini", validation_alias="OPENAI_MODEL")
	# Seconds; transport default only, calls are never retried
	openai_timeout: float = Field(default=30.0, validation_alias="OPENAI_TIMEOUT")
	question_temperature: float = Field(default=0.8, validation_alias="QUESTION_TEMPERATURE")
	scoring_temperature: float = Field(default=0.3, validation_alias="SCORING_TEMPERATURE")

	# Auth configuration
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	access_token_expire_minutes: int = Field(default=120, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()

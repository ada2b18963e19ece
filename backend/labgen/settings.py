from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal

class Settings(BaseSettings):
	# Provider can be "ai_studio" (Generative Language API), "vertex" (Vertex AI Express)
	# or "openai" (any OpenAI-compatible chat-completions endpoint)
	llm_provider: Literal["ai_studio", "vertex", "openai"] = Field(default="ai_studio", validation_alias="LLM_PROVIDER")

	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
	openai_model: str = Field(default="gpt-4", validation_alias="OPENAI_MODEL")
	openai_base_url: str = Field(default="https://api.openai.com/v1/chat/completions", validation_alias="OPENAI_BASE_URL")

	# Sampling is fixed per deployment, not per request
	generation_temperature: float = Field(default=0.8, validation_alias="GENERATION_TEMPERATURE")
	generation_max_tokens: int = Field(default=2000, validation_alias="GENERATION_MAX_TOKENS")
	llm_timeout_seconds: float = Field(default=60.0, validation_alias="LLM_TIMEOUT_SECONDS")
	# Extra attempts made by the request handler; the client itself is single-shot
	generation_retries: int = Field(default=0, validation_alias="GENERATION_RETRIES")

	# Allocation history archive
	history_limit: int = Field(default=50, validation_alias="HISTORY_LIMIT")
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()

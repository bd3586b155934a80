from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."
DEFAULT_NO_RESPONSE_TEXT = "No response generated"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        protected_namespaces=("settings_",),
    )

    app_name: str = Field(default="Chat Relay", alias="APP_NAME")
    environment: Literal["local", "dev", "staging", "prod"] = Field(
        default="local", alias="ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    inference_provider: Literal["bedrock", "gemini"] = Field(
        default="bedrock", alias="INFERENCE_PROVIDER"
    )

    model_id: str = Field(
        default="anthropic.claude-3-haiku-20240307-v1:0",
        validation_alias=AliasChoices("MODEL_ID", "BEDROCK_MODEL_ID", "model_id"),
    )
    aws_region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION", "aws_region"),
    )

    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, alias="SYSTEM_PROMPT")
    no_response_text: str = Field(
        default=DEFAULT_NO_RESPONSE_TEXT, alias="NO_RESPONSE_TEXT"
    )

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY", "gemini_api_key"),
    )
    gemini_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL")

    @property
    def effective_system_prompt(self) -> str:
        if self.system_prompt and self.system_prompt.strip():
            return self.system_prompt
        return DEFAULT_SYSTEM_PROMPT


@lru_cache
def get_settings() -> Settings:
    return Settings()

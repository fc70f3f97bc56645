"""
DevMind Backend — Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
       Bad values (temperature 5.0, unknown vendor in the priority list)
       fail at load time instead of on the first AI request.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py (startup) and the provider factory.
When:  Loaded once at module import time; validated before app starts.

Credential Handling:
    Vendor API keys are read here and handed straight to ProviderConfig,
    which wraps them in SecretStr. Nothing in this module logs them.
    A vendor whose key is empty (or still the .env.example placeholder)
    is treated as "not configured" and never registered.
"""

from typing import Iterator, List, Optional, Tuple

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from devmind.providers.base import ProviderConfig, VendorId

# Values copied from .env.example that people forget to replace
_PLACEHOLDER_SUFFIX = "_api_key_here"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development. At least one
    vendor credential must be provided for generation to work; without
    any, the service still starts and answers health/provider queries.

    Attributes are grouped by concern for readability.
    """

    # ── OpenAI ────────────────────────────────────────────────────────────
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_model: Optional[str] = Field(default=None)
    openai_temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    openai_max_output_tokens: Optional[int] = Field(default=None, gt=0)

    # ── Google Gemini ─────────────────────────────────────────────────────
    # How to obtain: https://aistudio.google.com/app/apikey
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "google_api_key"),
        description="Google Gemini API key",
    )
    gemini_model: Optional[str] = Field(default=None)
    gemini_temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    gemini_max_output_tokens: Optional[int] = Field(default=None, gt=0)

    # ── Anthropic Claude ──────────────────────────────────────────────────
    claude_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("anthropic_api_key", "claude_api_key"),
        description="Anthropic API key",
    )
    claude_model: Optional[str] = Field(default=None)
    claude_temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    claude_max_output_tokens: Optional[int] = Field(default=None, gt=0)

    # ── Provider Selection ────────────────────────────────────────────────
    # What: Order in which configured vendors are registered at startup.
    # The first vendor in this list that has a credential becomes active.
    provider_priority: str = Field(default="openai,gemini,claude")

    @field_validator("provider_priority")
    @classmethod
    def validate_provider_priority(cls, v: str) -> str:
        """Rejects unknown vendor ids and duplicates in the priority list."""
        names = [name.strip().lower() for name in v.split(",") if name.strip()]
        known = {vendor.value for vendor in VendorId}
        unknown = [name for name in names if name not in known]
        if unknown:
            raise ValueError(f"Unknown provider(s) {unknown}. Must be among: {sorted(known)}")
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate provider in priority list: {v!r}")
        return ",".join(names)

    @property
    def provider_priority_list(self) -> List[VendorId]:
        """
        What: Priority order as VendorId values.
        Vendors omitted from PROVIDER_PRIORITY are appended in their default
        order so a configured key is never silently ignored.
        """
        ordered = [VendorId(name) for name in self.provider_priority.split(",") if name]
        return ordered + [vendor for vendor in VendorId if vendor not in ordered]

    # ── Boundary Timeout ──────────────────────────────────────────────────
    # What: Upper bound (seconds) the HTTP layer waits for a generation call.
    # Unset by default: the vendor SDK's own transport timeout applies.
    ai_request_timeout: Optional[float] = Field(default=None, gt=0)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (parsed by property below)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
    }

    @staticmethod
    def _usable(key: str) -> bool:
        key = key.strip()
        return bool(key) and not key.lower().endswith(_PLACEHOLDER_SUFFIX)

    def provider_configs(self) -> Iterator[Tuple[VendorId, ProviderConfig]]:
        """
        What:  Yields one (vendor, config) pair per vendor with a usable key.
        Order: provider_priority_list, so the first pair is the startup default.
        """
        for vendor in self.provider_priority_list:
            prefix = vendor.value
            key = getattr(self, f"{prefix}_api_key")
            if not self._usable(key):
                continue
            yield vendor, ProviderConfig(
                credential=key.strip(),
                model_id=getattr(self, f"{prefix}_model"),
                temperature=getattr(self, f"{prefix}_temperature"),
                max_output_units=getattr(self, f"{prefix}_max_output_tokens"),
            )

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that at least one AI vendor is configured.
        When:  Called during app startup (lifespan).
        Why:   A clear startup message beats a 503 on the first request.
        """
        if not any(True for _ in self.provider_configs()):
            raise ValueError(
                "Configuration validation failed:\n"
                "  - No AI provider credential is set. Configure at least one of "
                "OPENAI_API_KEY, GEMINI_API_KEY or ANTHROPIC_API_KEY."
            )


# Singleton instance, imported by the application factory
settings = Settings()

"""Application settings loaded from environment variables."""

import os
import tempfile
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

from ...application.exceptions import ConfigurationMissingError
from ...application.services import DEFAULT_REPORT_NAME, SenderIdentity
from ...domain.services import EmailNormalizer, keep_address, strip_mailbox_prefix
from ...domain.value_objects import DEFAULT_ALERT_DAYS, AlertDays, RetryPolicy
from ..adapters.email import GraphMailConfig, SendGridConfig
from ..adapters.entra_id import GraphClientConfig
from ..adapters.storage import AzureBlobConfig

STORAGE_BACKENDS = ("azure_blob", "local")
EMAIL_BACKENDS = ("graph", "sendgrid")
RUN_PHASES = ("full", "alert")


def _env_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    return os.environ.get(key, str(default)).lower() in ("true", "1", "yes")


def _env_int(key: str, default: int) -> int:
    """Get integer from environment variable."""
    return int(os.environ.get(key, str(default)))


def _env_str(key: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


@dataclass
class Settings:
    """Application settings container."""

    # Azure/Entra ID
    azure_tenant_id: str = field(default_factory=lambda: _env_str("AZURE_TENANT_ID"))
    azure_client_id: str = field(default_factory=lambda: _env_str("AZURE_CLIENT_ID"))
    azure_client_secret: str = field(default_factory=lambda: _env_str("AZURE_CLIENT_SECRET"))

    # Alerting
    alert_days_raw: str = field(
        default_factory=lambda: _env_str("ALERT_DAYS", ",".join(map(str, sorted(DEFAULT_ALERT_DAYS))))
    )
    strip_mailbox_prefix: bool = field(default_factory=lambda: _env_bool("STRIP_MAILBOX_PREFIX", default=True))

    # Retry and concurrency
    max_retries: int = field(default_factory=lambda: _env_int("MAX_RETRIES", 3))
    base_delay_ms: int = field(default_factory=lambda: _env_int("BASE_DELAY_MS", 1000))
    cap_delay_ms: int = field(default_factory=lambda: _env_int("CAP_DELAY_MS", 8000))
    max_concurrency: int = field(default_factory=lambda: _env_int("MAX_CONCURRENCY", 8))

    # Snapshot storage
    report_name: str = field(default_factory=lambda: _env_str("REPORT_NAME", DEFAULT_REPORT_NAME))
    storage_backend: str = field(default_factory=lambda: _env_str("STORAGE_BACKEND", "azure_blob"))
    storage_connection_string: str = field(default_factory=lambda: _env_str("STORAGE_CONNECTION_STRING"))
    storage_container: str = field(default_factory=lambda: _env_str("STORAGE_CONTAINER"))
    storage_local_path: str = field(default_factory=lambda: _env_str("STORAGE_LOCAL_PATH", "./reports"))
    staging_dir_raw: str = field(default_factory=lambda: _env_str("STAGING_DIR"))

    # E-mail
    email_backend: str = field(default_factory=lambda: _env_str("EMAIL_BACKEND", "graph"))
    email_from: str = field(default_factory=lambda: _env_str("EMAIL_FROM"))
    email_from_name: str = field(default_factory=lambda: _env_str("EMAIL_FROM_NAME", "Credential Expiry Alerts"))
    sendgrid_api_key: str = field(default_factory=lambda: _env_str("SENDGRID_API_KEY"))
    graph_email_save_to_sent: bool = field(default_factory=lambda: _env_bool("GRAPH_EMAIL_SAVE_TO_SENT"))

    # Run configuration
    run_mode: str = field(default_factory=lambda: _env_str("RUN_MODE", "once"))
    run_phase: str = field(default_factory=lambda: _env_str("RUN_PHASE", "full"))
    cron_schedule: str = field(default_factory=lambda: _env_str("CRON_SCHEDULE", "0 8 * * *"))
    log_level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO"))
    dry_run: bool = field(default_factory=lambda: _env_bool("DRY_RUN"))

    # API settings
    api_enabled: bool = field(default_factory=lambda: _env_bool("API_ENABLED"))
    api_host: str = field(default_factory=lambda: _env_str("API_HOST", "0.0.0.0"))  # noqa: S104
    api_port: int = field(default_factory=lambda: _env_int("API_PORT", 8080))

    def validate(self) -> None:
        """
        Validate required settings.

        Raises:
            ConfigurationMissingError: Listing every missing variable.
            ValueError: If a value is present but invalid.
        """
        missing: list[str] = []

        needs_directory = self.run_phase == "full" or (self.email_backend == "graph" and not self.dry_run)
        if needs_directory:
            if not self.azure_tenant_id:
                missing.append("AZURE_TENANT_ID")
            if not self.azure_client_id:
                missing.append("AZURE_CLIENT_ID")
            if not self.azure_client_secret:
                missing.append("AZURE_CLIENT_SECRET")

        if self.storage_backend == "azure_blob":
            if not self.storage_connection_string:
                missing.append("STORAGE_CONNECTION_STRING")
            if not self.storage_container:
                missing.append("STORAGE_CONTAINER")

        if not self.email_from:
            missing.append("EMAIL_FROM")
        if self.email_backend == "sendgrid" and not self.sendgrid_api_key and not self.dry_run:
            missing.append("SENDGRID_API_KEY")

        if missing:
            msg = f"Missing required environment variables: {', '.join(missing)}"
            raise ConfigurationMissingError(msg)

        for name, value, allowed in (
            ("STORAGE_BACKEND", self.storage_backend, STORAGE_BACKENDS),
            ("EMAIL_BACKEND", self.email_backend, EMAIL_BACKENDS),
            ("RUN_PHASE", self.run_phase, RUN_PHASES),
        ):
            if value not in allowed:
                msg = f"Invalid {name}: {value} (use one of {', '.join(allowed)})"
                raise ValueError(msg)

        # Parse eagerly so bad values fail before any remote call
        _ = self.alert_days
        _ = self.retry_policy

    @cached_property
    def graph_config(self) -> GraphClientConfig:
        """Get Graph API client configuration."""
        return GraphClientConfig(
            tenant_id=self.azure_tenant_id,
            client_id=self.azure_client_id,
            client_secret=self.azure_client_secret,
        )

    @cached_property
    def alert_days(self) -> AlertDays:
        """Get alert milestones."""
        return AlertDays.parse(self.alert_days_raw)

    @cached_property
    def retry_policy(self) -> RetryPolicy:
        """Get retry policy."""
        return RetryPolicy(
            max_retries=self.max_retries,
            base_delay_ms=self.base_delay_ms,
            cap_delay_ms=self.cap_delay_ms,
        )

    @cached_property
    def email_normalizer(self) -> EmailNormalizer:
        """Get the owner e-mail normalization strategy."""
        return strip_mailbox_prefix if self.strip_mailbox_prefix else keep_address

    @cached_property
    def sender_identity(self) -> SenderIdentity:
        """Get the From identity of alert e-mails."""
        return SenderIdentity(address=self.email_from, name=self.email_from_name)

    @cached_property
    def blob_config(self) -> AzureBlobConfig:
        """Get Azure Blob Storage configuration."""
        return AzureBlobConfig(
            connection_string=self.storage_connection_string,
            container=self.storage_container,
        )

    @cached_property
    def staging_dir(self) -> Path:
        """Get the local staging directory for report copies."""
        if self.staging_dir_raw:
            return Path(self.staging_dir_raw)
        return Path(tempfile.gettempdir()) / "credential-alerts"

    @cached_property
    def sendgrid_config(self) -> SendGridConfig:
        """Get SendGrid configuration."""
        return SendGridConfig(api_key=self.sendgrid_api_key)

    @cached_property
    def graph_mail_config(self) -> GraphMailConfig:
        """Get Graph e-mail configuration."""
        return GraphMailConfig(save_to_sent_items=self.graph_email_save_to_sent)


def load_settings() -> Settings:
    """Load and validate settings from environment."""
    settings = Settings()
    settings.validate()
    return settings

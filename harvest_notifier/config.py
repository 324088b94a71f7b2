"""
============================================================================
Harvest Notifier v1.0.0
Notifier Configuration
============================================================================

Reliability Level: L5 High
Input Constraints: Environment variables (see table below)
Side Effects: Logs configuration on load (secrets never logged)

ENVIRONMENT VARIABLES:
    - DISCORD_REPORT_WEBHOOK_URL: Harvest/unwrap report endpoint
    - DISCORD_ALERT_WEBHOOK_URL: Error alert endpoint
    - DISCORD_PING_ROLE_IDS_ON_ERROR: Comma-separated role ids to mention
    - DISCORD_NOTIFY_UNEVENTFUL_HARVEST: Send uneventful reports (default: false)
    - DISCORD_ROLE_PING_ENABLED: Global role-ping toggle (default: false)
    - DISCORD_WEBHOOK_USERNAME / DISCORD_WEBHOOK_AVATAR_URL: Optional identity
    - DISCORD_REQUEST_TIMEOUT_SECONDS: Transport timeout (default: 10)
    - REPORT_URL_TEMPLATE: Full report link, "{report_id}" placeholder
    - VAULT_URL_TEMPLATE: Vault page link, "{vault_id}" placeholder
    - REDACT_SECRETS: Extra comma-separated values scrubbed from messages

ERROR CODES:
    - CFG-001: Invalid configuration value, default used
============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging
import os

logger = logging.getLogger(__name__)


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_NOTIFY_UNEVENTFUL = False

# Role pings were switched off operationally; keep that as the default
DEFAULT_ROLE_PING_ENABLED = False

DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0

DEFAULT_VAULT_URL_TEMPLATE = "https://app.beefy.finance/vault/{vault_id}"

ERROR_CONFIG_INVALID = "CFG-001"

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


# =============================================================================
# Parsing helpers
# =============================================================================

def _env_str(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning(
        f"[{ERROR_CONFIG_INVALID}] Invalid boolean for {name}: {raw!r}, using default: {default}"
    )
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        value = -1.0
    if value <= 0:
        logger.warning(
            f"[{ERROR_CONFIG_INVALID}] Invalid number for {name}: {raw!r}, using default: {default}"
        )
        return default
    return value


def _env_list(name: str) -> List[str]:
    raw = os.environ.get(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


# =============================================================================
# NotifierConfig
# =============================================================================

@dataclass(frozen=True)
class NotifierConfig:
    """
    Static configuration passed into the policy and dispatcher.

    Nothing in the notification path reads process-wide state; build one
    of these (from_environment() or directly in tests) and hand it over.
    """
    report_webhook_url: Optional[str] = None
    alert_webhook_url: Optional[str] = None
    ping_role_ids_on_error: List[str] = field(default_factory=list)
    notify_uneventful: bool = DEFAULT_NOTIFY_UNEVENTFUL
    role_ping_enabled: bool = DEFAULT_ROLE_PING_ENABLED
    report_url_template: Optional[str] = None
    vault_url_template: str = DEFAULT_VAULT_URL_TEMPLATE
    webhook_username: Optional[str] = None
    webhook_avatar_url: Optional[str] = None
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    extra_secrets: List[str] = field(default_factory=list)

    @classmethod
    def from_environment(cls) -> "NotifierConfig":
        config = cls(
            report_webhook_url=_env_str("DISCORD_REPORT_WEBHOOK_URL"),
            alert_webhook_url=_env_str("DISCORD_ALERT_WEBHOOK_URL"),
            ping_role_ids_on_error=_env_list("DISCORD_PING_ROLE_IDS_ON_ERROR"),
            notify_uneventful=_env_bool("DISCORD_NOTIFY_UNEVENTFUL_HARVEST", DEFAULT_NOTIFY_UNEVENTFUL),
            role_ping_enabled=_env_bool("DISCORD_ROLE_PING_ENABLED", DEFAULT_ROLE_PING_ENABLED),
            report_url_template=_env_str("REPORT_URL_TEMPLATE"),
            vault_url_template=_env_str("VAULT_URL_TEMPLATE") or DEFAULT_VAULT_URL_TEMPLATE,
            webhook_username=_env_str("DISCORD_WEBHOOK_USERNAME"),
            webhook_avatar_url=_env_str("DISCORD_WEBHOOK_AVATAR_URL"),
            request_timeout_seconds=_env_float(
                "DISCORD_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS
            ),
            extra_secrets=_env_list("REDACT_SECRETS"),
        )

        logger.info(
            f"[NOTIFIER-CONFIG] Loaded from environment | "
            f"report_webhook={'set' if config.report_webhook_url else 'unset'} | "
            f"alert_webhook={'set' if config.alert_webhook_url else 'unset'} | "
            f"ping_roles={len(config.ping_role_ids_on_error)} | "
            f"notify_uneventful={config.notify_uneventful} | "
            f"role_ping_enabled={config.role_ping_enabled} | "
            f"extra_secrets={len(config.extra_secrets)}"
        )
        return config

    def secrets(self) -> List[str]:
        """Every configured value that must never leave the process in clear text."""
        values = [self.report_webhook_url, self.alert_webhook_url] + list(self.extra_secrets)
        return [v for v in values if v]

    def report_url(self, report_id: Optional[int]) -> Optional[str]:
        if report_id is None or not self.report_url_template:
            return None
        return self.report_url_template.replace("{report_id}", str(report_id))

    def vault_url(self, vault_id: str) -> str:
        return self.vault_url_template.replace("{vault_id}", vault_id)


__all__ = [
    "NotifierConfig",
    "DEFAULT_NOTIFY_UNEVENTFUL",
    "DEFAULT_ROLE_PING_ENABLED",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "DEFAULT_VAULT_URL_TEMPLATE",
    "ERROR_CONFIG_INVALID",
]

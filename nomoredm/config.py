from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path


class ConfigurationError(ValueError):
    pass


VALID_ACTION_METHODS = ("PUT", "POST")
VALID_AUTH_SCHEMES = ("Bearer", "Bot")


@dataclass(frozen=True)
class AppSettings:
    token: str
    base_url: str
    action_path_template: str
    action_method: str
    auth_scheme: str
    protection_hours: int
    interval_seconds: float
    dispatch_delay_seconds: float
    timeout_seconds: int
    run_on_start: bool
    seed_tenant_ids: tuple[str, ...]
    log_level: str

    @staticmethod
    def from_env() -> "AppSettings":
        _load_dotenv_if_present()

        token = os.getenv("NOMOREDM_TOKEN", "").strip() or os.getenv("DISCORD_TOKEN", "").strip()

        base_url = os.getenv("NOMOREDM_API_BASE_URL", "https://discord.com/api/v9").strip().rstrip("/")
        action_path_template = os.getenv(
            "NOMOREDM_ACTION_PATH_TEMPLATE",
            "/guilds/{tenant_id}/incident-actions",
        ).strip()
        action_method = os.getenv("NOMOREDM_ACTION_METHOD", "PUT").strip().upper()

        raw_scheme = os.getenv("NOMOREDM_AUTH_SCHEME", "Bearer").strip()
        auth_scheme = raw_scheme[:1].upper() + raw_scheme[1:].lower()

        raw_tenants = os.getenv("NOMOREDM_TENANT_IDS", "").strip()
        seed_tenant_ids = tuple(t.strip() for t in raw_tenants.split(",") if t.strip())

        try:
            protection_hours = int(os.getenv("NOMOREDM_PROTECTION_HOURS", "24"))
            interval_seconds = float(os.getenv("NOMOREDM_INTERVAL_SECONDS", "43200"))
            dispatch_delay_seconds = float(os.getenv("NOMOREDM_DISPATCH_DELAY_SECONDS", "2"))
            timeout_seconds = int(os.getenv("NOMOREDM_TIMEOUT_SECONDS", "15"))
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        run_on_start = _parse_bool(os.getenv("NOMOREDM_RUN_ON_START", "false"))
        log_level = os.getenv("NOMOREDM_LOG_LEVEL", "INFO").strip().upper()

        settings = AppSettings(
            token=token,
            base_url=base_url,
            action_path_template=action_path_template,
            action_method=action_method,
            auth_scheme=auth_scheme,
            protection_hours=protection_hours,
            interval_seconds=interval_seconds,
            dispatch_delay_seconds=dispatch_delay_seconds,
            timeout_seconds=timeout_seconds,
            run_on_start=run_on_start,
            seed_tenant_ids=seed_tenant_ids,
            log_level=log_level,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if not self.token:
            raise ConfigurationError(
                "Missing required settings: NOMOREDM_TOKEN (or DISCORD_TOKEN)"
            )

        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError("NOMOREDM_API_BASE_URL must be an http(s) URL")

        if not self.action_path_template.startswith("/") or "{tenant_id}" not in self.action_path_template:
            raise ConfigurationError(
                "NOMOREDM_ACTION_PATH_TEMPLATE must start with '/' and contain '{tenant_id}'"
            )
        try:
            self.action_path_template.format(tenant_id="0")
        except (KeyError, IndexError, ValueError) as exc:
            raise ConfigurationError(
                f"NOMOREDM_ACTION_PATH_TEMPLATE has an unknown placeholder: {exc}"
            ) from exc

        if self.action_method not in VALID_ACTION_METHODS:
            raise ConfigurationError("NOMOREDM_ACTION_METHOD must be one of: PUT, POST")

        if self.auth_scheme not in VALID_AUTH_SCHEMES:
            raise ConfigurationError("NOMOREDM_AUTH_SCHEME must be one of: Bearer, Bot")

        if self.protection_hours <= 0:
            raise ConfigurationError("NOMOREDM_PROTECTION_HOURS must be greater than 0")

        if self.interval_seconds <= 0:
            raise ConfigurationError("NOMOREDM_INTERVAL_SECONDS must be greater than 0")

        if self.dispatch_delay_seconds < 0:
            raise ConfigurationError("NOMOREDM_DISPATCH_DELAY_SECONDS must be 0 or greater")

        if self.timeout_seconds <= 0:
            raise ConfigurationError("NOMOREDM_TIMEOUT_SECONDS must be greater than 0")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _load_dotenv_if_present(file_name: str = ".env") -> None:
    explicit = os.getenv("NOMOREDM_ENV_FILE", "").strip()
    candidates = [Path(explicit).expanduser()] if explicit else []
    candidates.append(Path.cwd() / file_name)

    for candidate in candidates:
        _load_env_file(candidate)


def _load_env_file(path: Path) -> None:
    if not path.is_file():
        return

    try:
        with path.open("r", encoding="utf-8") as env_file:
            for raw_line in env_file:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                if key.startswith("export "):
                    key = key[len("export "):].strip()
                value = value.strip().strip('"').strip("'")

                if key and key not in os.environ:
                    os.environ[key] = value
    except OSError:
        return

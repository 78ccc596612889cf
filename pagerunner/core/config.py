"""
Configuration Management for pagerunner

This module provides centralized configuration management with:
- Environment variable loading (configs/.env, then the process environment)
- Type validation
- Sensible defaults
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

from pagerunner.core.logging import VALID_LEVELS


ENV_PREFIX = "PAGERUNNER_"
DEFAULT_ENV_PATH = Path("configs/.env")

_FALSY = {"0", "false", "False", "no", "off"}


def _env(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name, default)


def _env_int(name: str, default: int) -> Optional[int]:
    raw = _env(name, "").strip()
    if raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return None


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip() not in _FALSY


class Config:
    """
    Application configuration loaded from environment variables.

    All settings are read from configs/.env or the environment, using the
    PAGERUNNER_ prefix. See configs/.env.example for the full list.
    """

    def __init__(self, env_path: Optional[Path] = None):
        """
        Initialize configuration from environment.

        Args:
            env_path: Path to .env file (default: configs/.env)
        """
        if env_path is None:
            env_path = DEFAULT_ENV_PATH

        # Values already present in the environment win over the file
        load_dotenv(dotenv_path=env_path, override=False)

        # === Browser Configuration ===
        self.driver_path: str = _env("DRIVER_PATH", "")
        self.headless: bool = _env_flag("HEADLESS", True)
        self.load_resources: bool = _env_flag("LOAD_RESOURCES", True)
        self.inject_scripts: bool = _env_flag("INJECT_SCRIPTS", True)
        self.strict_transport_security: bool = _env_flag("STRICT_TRANSPORT_SECURITY", True)
        self.ignore_cert_errors: bool = _env_flag("IGNORE_CERT_ERRORS", True)
        self.user_agent: Optional[str] = _env("USER_AGENT", "") or None

        # === Timeouts ===
        # None when the raw value is not an integer; validate() reports it
        self._raw_timeouts = {name: _env(name, "") for name in ("NAV_TIMEOUT_MS", "ACTION_TIMEOUT_MS")}
        self.nav_timeout_ms: Optional[int] = _env_int("NAV_TIMEOUT_MS", 30000)
        self.action_timeout_ms: Optional[int] = _env_int("ACTION_TIMEOUT_MS", 15000)

        # === Logging Configuration ===
        self.log_level: str = _env("LOG_LEVEL", "INFO").upper()
        self.log_file: Optional[str] = _env("LOG_FILE", "") or None

        # === Targets ===
        self.github_url: str = _env("GITHUB_URL", "https://github.com").rstrip("/")

    def validate(self) -> None:
        """
        Validate configuration.

        Raises:
            ValueError: If any setting is missing or invalid
        """
        errors = []

        for name, value in (("NAV_TIMEOUT_MS", self.nav_timeout_ms),
                            ("ACTION_TIMEOUT_MS", self.action_timeout_ms)):
            if value is None:
                errors.append(f"{name} must be an integer number of milliseconds, got {self._raw_timeouts[name]!r}")
            elif value <= 0:
                errors.append(f"{name} must be positive, got {value}")

        if self.log_level not in VALID_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {sorted(VALID_LEVELS)}, got {self.log_level}")

        if self.driver_path and not Path(self.driver_path).exists():
            errors.append(f"DRIVER_PATH not found: {self.driver_path}")

        if not self.github_url.startswith(("http://", "https://")):
            errors.append(f"GITHUB_URL must be an http(s) URL, got {self.github_url}")

        if errors:
            raise ValueError("Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

    def browser_config(self, headless: Optional[bool] = None):
        """Project the browser settings into a BrowserConfig."""
        from pagerunner.browser.factory import BrowserConfig

        return BrowserConfig(
            driver_path=self.driver_path,
            headless=self.headless if headless is None else headless,
            resource_loading_enabled=self.load_resources,
            script_injection_enabled=self.inject_scripts,
            strict_transport_security=self.strict_transport_security,
            ignore_certificate_errors=self.ignore_cert_errors,
            nav_timeout_ms=self.nav_timeout_ms,
            action_timeout_ms=self.action_timeout_ms,
            user_agent=self.user_agent,
        )

    def __repr__(self) -> str:
        return (
            f"Config(\n"
            f"  driver_path={self.driver_path or 'bundled'},\n"
            f"  headless={self.headless},\n"
            f"  nav_timeout_ms={self.nav_timeout_ms},\n"
            f"  action_timeout_ms={self.action_timeout_ms},\n"
            f"  log_level={self.log_level}\n"
            f")"
        )


_config: Optional[Config] = None


def get_config(env_path: Optional[Path] = None) -> Config:
    """
    Get the global configuration instance.

    Args:
        env_path: Optional path to .env file (only used on first call)

    Returns:
        Global Config instance
    """
    global _config
    if _config is None:
        _config = Config(env_path=env_path)
    return _config


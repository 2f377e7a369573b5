"""
Configuration package for the Blog Generator service (environment loader and runtime settings).

Settings come from two places. Non-secret defaults (upstream base URL, model id, generation
parameters, body size cap, CORS details) live in `config.json` next to this module. The process
environment ("env") supplies the deployment-specific values and the upstream API credential, and
overrides the JSON defaults where both define a value. A local `.env` file is honoured through
python-dotenv so developers do not have to export variables by hand.

`load_settings()` validates everything in one pass and raises a single `ConfigError` listing every
problem it found, so a misconfigured deployment fails at startup with one readable message instead
of failing on the first request. The returned `Settings` value is frozen; the application factory
passes it to each component explicitly rather than exposing a mutable global.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dotenv import load_dotenv

from .logging_config import LEVEL_ALIASES

# Load environment variables from .env file
load_dotenv()

# Get the config directory path (where this file is located)
CONFIG_DIR = Path(__file__).parent

VALID_ENVIRONMENTS = ('development', 'production', 'test')


class ConfigError(EnvironmentError):
    """
    Raised when one or more settings are missing or invalid.

    The `errors` attribute keeps the individual messages so callers (and tests) can inspect them
    without parsing the aggregate text.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Configuration errors:\n" + "\n".join(self.errors))


@dataclass(frozen=True)
class Settings:
    """
    Immutable, validated runtime settings.

    The API key is excluded from `repr()` so the object can be logged or printed in a debugger
    without leaking the credential.
    """

    huggingface_api_key: str = field(repr=False)
    port: int = 5000
    host: str = '0.0.0.0'
    app_env: str = 'development'
    cors_origin: str = 'http://localhost:3000'
    rate_limit_window_ms: int = 60000
    rate_limit_max: int = 10
    log_level: str = 'info'
    llm_base_url: str = 'https://router.huggingface.co/v1'
    llm_model: str = 'Qwen/Qwen2.5-72B-Instruct'
    llm_max_tokens: int = 2000
    llm_temperature: float = 0.7
    llm_timeout: float = 120.0
    llm_probe_timeout: float = 5.0
    max_body_bytes: int = 10240
    cors_allow_methods: Tuple[str, ...] = ('GET', 'POST')
    cors_allow_headers: Tuple[str, ...] = ('Content-Type', 'Authorization')
    cors_max_age: int = 86400
    log_file_path: Optional[str] = None
    log_max_bytes: int = 5 * 1024 * 1024
    log_backup_count: int = 3

    @property
    def is_production(self) -> bool:
        return self.app_env == 'production'

    @property
    def rate_limit_window_seconds(self) -> int:
        """Window length rounded up to whole seconds (never below one)."""
        return max(1, math.ceil(self.rate_limit_window_ms / 1000))

    def logging_config(self) -> Dict[str, Any]:
        """Render the logging section in the shape `setup_app_logging` expects."""
        return {
            'level': self.log_level,
            'env': self.app_env,
            'file_path': self.log_file_path,
            'max_bytes': self.log_max_bytes,
            'backup_count': self.log_backup_count,
        }


def _load_json_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the JSON defaults shipped with the service.

    A missing file yields an empty mapping so the dataclass defaults apply. A file that exists but
    cannot be parsed is a deployment mistake and is reported as a ConfigError.
    """
    cfg_path = path or (CONFIG_DIR / 'config.json')
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as exc:
        raise ConfigError([f"Invalid JSON in {cfg_path}: {exc}"]) from exc
    return data if isinstance(data, dict) else {}


def _pick(env: Mapping[str, str], name: str, default: Any) -> Any:
    value = env.get(name)
    if value is None or str(value).strip() == '':
        return default
    return str(value).strip()


def _as_int(value: Any, name: str, errors: List[str], minimum: int = 1,
            maximum: Optional[int] = None) -> Optional[int]:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        errors.append(f"Invalid value for {name}: {value}")
        return None
    if number < minimum or (maximum is not None and number > maximum):
        errors.append(f"Invalid value for {name}: {value}")
        return None
    return number


def _as_float(value: Any, name: str, errors: List[str]) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        errors.append(f"Invalid value for {name}: {value}")
        return None
    if number <= 0:
        errors.append(f"Invalid value for {name}: {value}")
        return None
    return number


def load_settings(env: Optional[Mapping[str, str]] = None,
                  json_config: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Build validated Settings from the environment and the JSON defaults.

    Args:
        env (Mapping[str, str], optional): Environment mapping; defaults to `os.environ`.
        json_config (dict, optional): Parsed JSON defaults; defaults to `config/config.json`.

    Returns:
        Settings: The frozen settings object.

    Raises:
        ConfigError: If any required value is missing or any value fails validation. All
            problems are reported together.
    """
    if env is None:
        env = os.environ
    if json_config is None:
        json_config = _load_json_config()

    server_cfg = json_config.get('server', {}) or {}
    cors_cfg = json_config.get('cors', {}) or {}
    llm_cfg = json_config.get('llm', {}) or {}
    log_cfg = json_config.get('logging', {}) or {}

    errors: List[str] = []
    values: Dict[str, Any] = {}

    api_key = _pick(env, 'HUGGINGFACE_API_KEY', None)
    if api_key is None:
        errors.append("Missing required environment variable: HUGGINGFACE_API_KEY")

    values['port'] = _as_int(_pick(env, 'PORT', server_cfg.get('port', 5000)), 'PORT', errors,
                             minimum=1, maximum=65535)
    values['host'] = _pick(env, 'HOST', server_cfg.get('host', '0.0.0.0'))

    app_env = str(_pick(env, 'APP_ENV', 'development')).lower()
    if app_env not in VALID_ENVIRONMENTS:
        errors.append(f"Invalid value for APP_ENV: {app_env}")
    values['app_env'] = app_env

    values['cors_origin'] = _pick(env, 'CORS_ORIGIN', 'http://localhost:3000')
    values['rate_limit_window_ms'] = _as_int(_pick(env, 'RATE_LIMIT_WINDOW_MS', 60000),
                                             'RATE_LIMIT_WINDOW_MS', errors)
    values['rate_limit_max'] = _as_int(_pick(env, 'RATE_LIMIT_MAX', 10), 'RATE_LIMIT_MAX', errors)

    log_level = str(_pick(env, 'LOG_LEVEL', 'info')).lower()
    if log_level not in LEVEL_ALIASES:
        errors.append(f"Invalid value for LOG_LEVEL: {log_level}")
    values['log_level'] = log_level

    values['llm_base_url'] = str(_pick(env, 'LLM_BASE_URL', llm_cfg.get('base_url', Settings.llm_base_url))).rstrip('/')
    values['llm_model'] = _pick(env, 'LLM_MODEL', llm_cfg.get('model', Settings.llm_model))
    values['llm_max_tokens'] = _as_int(llm_cfg.get('max_tokens', Settings.llm_max_tokens), 'llm.max_tokens', errors)
    values['llm_temperature'] = _as_float(llm_cfg.get('temperature', Settings.llm_temperature), 'llm.temperature', errors)
    values['llm_timeout'] = _as_float(llm_cfg.get('timeout', Settings.llm_timeout), 'llm.timeout', errors)
    values['llm_probe_timeout'] = _as_float(llm_cfg.get('probe_timeout', Settings.llm_probe_timeout),
                                            'llm.probe_timeout', errors)

    values['max_body_bytes'] = _as_int(server_cfg.get('max_body_bytes', Settings.max_body_bytes),
                                       'server.max_body_bytes', errors)
    values['cors_allow_methods'] = tuple(cors_cfg.get('allow_methods', Settings.cors_allow_methods))
    values['cors_allow_headers'] = tuple(cors_cfg.get('allow_headers', Settings.cors_allow_headers))
    values['cors_max_age'] = _as_int(cors_cfg.get('max_age', Settings.cors_max_age), 'cors.max_age', errors,
                                     minimum=0)

    values['log_file_path'] = log_cfg.get('file_path') or None
    values['log_max_bytes'] = _as_int(log_cfg.get('max_bytes', Settings.log_max_bytes), 'logging.max_bytes', errors)
    values['log_backup_count'] = _as_int(log_cfg.get('backup_count', Settings.log_backup_count),
                                         'logging.backup_count', errors, minimum=0)

    if errors:
        raise ConfigError(errors)

    return Settings(huggingface_api_key=api_key, **values)


__all__ = [
    'CONFIG_DIR',
    'ConfigError',
    'Settings',
    'load_settings',
]

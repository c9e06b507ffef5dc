"""
Configuration for fetch_ajax: defaults, process-wide settings and the merge step.
"""
import logging
import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional, Union

from .types import AjaxConfig

logger = logging.getLogger("fetch_ajax.config")

DEFAULT_INJECT_HEADER_KEYS = [
    "x-request-id",
    "x-b3-traceid",
    "x-b3-spanid",
    "x-b3-parentspanid",
    "x-b3-sampled",
]

DEFAULT_AJAX_CONFIG = AjaxConfig(
    credentials="include",
    mode="cors",
    timeout=120.0,  # 2 minutes
    timeout_error_message="timeout",
    timeout_error_status=504,
    method="POST",
    default_put_and_post_content_type="application/json; charset=UTF-8",
    default_inject_header_keys=list(DEFAULT_INJECT_HEADER_KEYS),
)

DEFAULT_STOPPED_ERROR_MESSAGE = "Requests have been stopped"


def strip_none(config: Union[AjaxConfig, Mapping[str, Any], None]) -> Dict[str, Any]:
    """Return the fields of config that are not None."""
    if config is None:
        return {}
    if isinstance(config, AjaxConfig):
        items = ((f.name, getattr(config, f.name)) for f in fields(config))
    else:
        items = config.items()
    return {key: value for key, value in items if value is not None}


def to_config(config: Union[AjaxConfig, Mapping[str, Any], None] = None, **options: Any) -> AjaxConfig:
    """Build an AjaxConfig from a config, a mapping and/or keyword options."""
    values = strip_none(config)
    values.update(strip_none(options))
    return AjaxConfig(**values)


def merge_config(defaults: AjaxConfig, partial: Union[AjaxConfig, Mapping[str, Any], None]) -> AjaxConfig:
    """
    Overlay partial onto defaults.

    None fields of partial are dropped first so they never mask a default.
    Mutable containers are copied so later mutation stays local to the result.
    """
    merged = replace(defaults, **strip_none(partial))
    merged.headers = dict(merged.headers or {})
    if merged.default_inject_header_keys is not None:
        merged.default_inject_header_keys = list(merged.default_inject_header_keys)
    if merged.ignore is not None:
        merged.ignore = list(merged.ignore)
    return merged


def _env_float(environ: Mapping[str, str], name: str) -> Optional[float]:
    raw = environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_defaults_from_env(
    environ: Optional[Mapping[str, str]] = None,
    base: AjaxConfig = DEFAULT_AJAX_CONFIG,
) -> AjaxConfig:
    """
    Apply environment overrides to base.

    Recognised variables:
    - FETCH_AJAX_TIMEOUT (seconds)
    - FETCH_AJAX_TIMEOUT_ERROR_STATUS
    - FETCH_AJAX_TIMEOUT_ERROR_MESSAGE
    - FETCH_AJAX_METHOD
    - FETCH_AJAX_CREDENTIALS
    - FETCH_AJAX_MODE
    """
    if environ is None:
        environ = os.environ

    overrides: Dict[str, Any] = {}

    timeout = _env_float(environ, "FETCH_AJAX_TIMEOUT")
    if timeout is not None:
        overrides["timeout"] = timeout

    status = _env_float(environ, "FETCH_AJAX_TIMEOUT_ERROR_STATUS")
    if status is not None:
        overrides["timeout_error_status"] = int(status)

    for env_name, field_name in (
        ("FETCH_AJAX_TIMEOUT_ERROR_MESSAGE", "timeout_error_message"),
        ("FETCH_AJAX_METHOD", "method"),
        ("FETCH_AJAX_CREDENTIALS", "credentials"),
        ("FETCH_AJAX_MODE", "mode"),
    ):
        value = environ.get(env_name)
        if value:
            overrides[field_name] = value.upper() if field_name == "method" else value

    if overrides:
        logger.debug(f"load_defaults_from_env: overrides={sorted(overrides)}")
    return merge_config(base, overrides)


@dataclass
class AjaxSettings:
    """
    Process-wide request state.

    Created once at startup and shared by reference with every Ajax instance
    that should observe the same defaults and stop switch.
    """

    defaults: AjaxConfig = field(default_factory=lambda: merge_config(DEFAULT_AJAX_CONFIG, None))
    stopped_error_message: str = DEFAULT_STOPPED_ERROR_MESSAGE
    _stopped: bool = field(default=False, repr=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AjaxSettings":
        return cls(defaults=load_defaults_from_env(environ))

    def update_defaults(self, **changes: Any) -> AjaxConfig:
        """Overlay changes onto the current defaults."""
        self.defaults = merge_config(self.defaults, changes)
        return self.defaults

    def stop(self) -> None:
        self._stopped = True

    def resume(self) -> None:
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

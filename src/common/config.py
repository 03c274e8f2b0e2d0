"""Helpers for loading runtime configuration profiles and validating reader options."""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Pattern, Union

from .errors import ConfigurationError
from .models import GlobalSettings, Origin, ProfileSettings, ReaderOptions, ReadMode, RuntimeConfig

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "defaults.json"
DEFAULT_PROFILE = "default"
ALLOWED_ERROR_POLICIES = {"fail-fast", "strict", "replace"}
ALLOWED_SEPARATOR_KINDS = {"literal", "pattern"}
ALLOWED_TIE_BREAKS = {"shortest", "longest"}

SeparatorValue = Union[str, bytes, Pattern[str], Pattern[bytes]]


@dataclass(slots=True)
class ConfigDocument:
    source: Path
    version: int
    global_settings: GlobalSettings
    profiles: Dict[str, ProfileSettings]


def load_runtime_config(
    profile: str = DEFAULT_PROFILE,
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> RuntimeConfig:
    """Load configuration JSON, validate it, and resolve a specific profile."""

    document = load_config_document(
        profile_name=profile,
        config_path=config_path,
        overrides=overrides,
    )
    return RuntimeConfig(global_settings=document.global_settings, profile=document.profiles[profile])


def load_config_document(
    *,
    profile_name: Optional[str] = None,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> ConfigDocument:
    cfg_path = config_path or DEFAULT_CONFIG_PATH
    raw = _read_config_json(cfg_path)

    version = _require_positive_int(raw.get("version"), "version", cfg_path)
    global_section = raw.get("global")
    if not isinstance(global_section, Mapping):
        raise ConfigurationError(f"'global' section missing in {cfg_path}")

    overrides = overrides or {}
    global_data = {**global_section, **(overrides.get("global") or {})}
    global_settings = _build_global_settings(global_data, cfg_path)

    profiles_section = raw.get("profiles")
    if not isinstance(profiles_section, Mapping) or not profiles_section:
        raise ConfigurationError(f"'profiles' section missing in {cfg_path}")

    profile_overrides = overrides.get("profile") or {}
    profiles: Dict[str, ProfileSettings] = {}
    for name, profile_data in profiles_section.items():
        if not isinstance(profile_data, Mapping):
            raise ConfigurationError(f"Profile '{name}' must be an object in {cfg_path}")
        merged = dict(profile_data)
        if profile_name and name == profile_name and profile_overrides:
            merged = {**merged, **profile_overrides}
        profiles[name] = _build_profile_settings(name, merged, cfg_path)

    if profile_name and profile_name not in profiles:
        raise ConfigurationError(
            f"Profile '{profile_name}' not found in {cfg_path}",
            context={"available": sorted(profiles)},
        )

    return ConfigDocument(
        source=cfg_path,
        version=version,
        global_settings=global_settings,
        profiles=profiles,
    )


def error_mode_from_policy(policy: str) -> str:
    """Translate human-friendly error policy into Python's codec error handler."""

    return "strict" if policy.lower() in {"fail-fast", "strict"} else "replace"


def resolve_reader_options(
    *,
    mode: Union[ReadMode, str] = ReadMode.FORWARD,
    origin: Union[Origin, str, None] = None,
    binmode: bool = False,
    separator: SeparatorValue = b"\n",
    pattern: bool = False,
    block_size: Any = 8192,
    pattern_horizon: Any = 256,
    backward_tie_break: str = "longest",
    encoding: str = "utf-8",
) -> ReaderOptions:
    """Validate constructor options into an immutable ``ReaderOptions``.

    Runs before any file is opened, so a bad combination never touches the
    filesystem. ``str`` separators are encoded with ``encoding``; a compiled
    ``re.Pattern`` (or ``pattern=True``) selects pattern matching.
    """

    resolved_mode = _coerce_enum(ReadMode, mode, "mode")
    if origin is None:
        resolved_origin = Origin.TAIL if resolved_mode is ReadMode.BACKWARD else Origin.HEAD
    else:
        if resolved_mode is not ReadMode.BIDIRECTIONAL:
            raise ConfigurationError(
                f"origin is only valid with mode=bidirectional (got mode={resolved_mode.value})"
            )
        resolved_origin = _coerce_enum(Origin, origin, "origin")

    source = Path("<options>")
    size = _require_positive_int(block_size, "block_size", source)
    horizon = _require_positive_int(pattern_horizon, "pattern_horizon", source)
    if backward_tie_break not in ALLOWED_TIE_BREAKS:
        allowed = ", ".join(sorted(ALLOWED_TIE_BREAKS))
        raise ConfigurationError(f"Unsupported backward_tie_break '{backward_tie_break}'. Allowed: {allowed}")

    return ReaderOptions(
        mode=resolved_mode,
        origin=resolved_origin,
        binmode=bool(binmode),
        separator=_compile_separator(separator, pattern=pattern, encoding=encoding),
        block_size=size,
        pattern_horizon=horizon,
        backward_tie_break=backward_tie_break,  # type: ignore[arg-type]
    )


def options_from_profile(runtime: RuntimeConfig, **overrides: Any) -> ReaderOptions:
    """Build reader options from a resolved profile; explicit keyword overrides win."""

    profile = runtime.profile
    params: Dict[str, Any] = {
        "binmode": profile.binmode,
        "separator": profile.separator,
        "pattern": profile.separator_kind == "pattern",
        "block_size": profile.block_size,
        "pattern_horizon": profile.pattern_horizon,
        "backward_tie_break": profile.backward_tie_break,
        "encoding": runtime.global_settings.encoding,
    }
    params.update({key: value for key, value in overrides.items() if value is not None})
    return resolve_reader_options(**params)


# ---------------------------------------------------------------------------
# Internal helpers


def _read_config_json(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:  # pragma: no cover - depends on filesystem
        raise ConfigurationError(f"Config file '{path}' not found") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file '{path}' is not valid JSON: {exc}") from exc


def _build_global_settings(data: Mapping[str, Any], source: Path) -> GlobalSettings:
    encoding = _require_string(data.get("encoding", GlobalSettings().encoding), "global.encoding", source)
    error_policy = _normalize_error_policy(
        data.get("error_policy", GlobalSettings().error_policy),
        source,
    )
    return GlobalSettings(encoding=encoding, error_policy=error_policy)


def _build_profile_settings(name: str, data: Mapping[str, Any], source: Path) -> ProfileSettings:
    prefix = f"profiles.{name}"
    required_fields = ("description", "block_size")
    missing = [field for field in required_fields if field not in data]
    if missing:
        raise ConfigurationError(f"Profile '{name}' missing fields {missing} in {source}")

    description = _require_string(data.get("description"), f"{prefix}.description", source)
    block_size = _require_positive_int(data.get("block_size"), f"{prefix}.block_size", source)
    pattern_horizon = _require_positive_int(
        data.get("pattern_horizon", 256), f"{prefix}.pattern_horizon", source
    )

    separator = data.get("separator", "\n")
    if not isinstance(separator, str) or not separator:
        raise ConfigurationError(f"{prefix}.separator must be a non-empty string in {source}")
    separator_kind = _require_choice(
        data.get("separator_kind", "literal"), ALLOWED_SEPARATOR_KINDS, f"{prefix}.separator_kind", source
    )
    tie_break = _require_choice(
        data.get("backward_tie_break", "longest"), ALLOWED_TIE_BREAKS, f"{prefix}.backward_tie_break", source
    )
    binmode = data.get("binmode", False)
    if not isinstance(binmode, bool):
        raise ConfigurationError(f"{prefix}.binmode must be a boolean in {source}")

    return ProfileSettings(
        description=description,
        block_size=block_size,
        separator=separator,
        separator_kind=separator_kind,  # type: ignore[arg-type]
        binmode=binmode,
        pattern_horizon=pattern_horizon,
        backward_tie_break=tie_break,  # type: ignore[arg-type]
    )


def _compile_separator(value: SeparatorValue, *, pattern: bool, encoding: str) -> Union[bytes, Pattern[bytes]]:
    if isinstance(value, re.Pattern):
        compiled = value
        if isinstance(compiled.pattern, str):
            compiled = re.compile(compiled.pattern.encode(encoding), compiled.flags & ~re.UNICODE)
    else:
        if isinstance(value, str):
            raw = value.encode(encoding)
        elif isinstance(value, (bytes, bytearray)):
            raw = bytes(value)
        else:
            raise ConfigurationError(f"separator must be str, bytes or a compiled pattern, got {type(value).__name__}")
        if not raw:
            raise ConfigurationError("separator must not be empty")
        if not pattern:
            return raw
        try:
            compiled = re.compile(raw)
        except re.error as exc:
            raise ConfigurationError(f"separator pattern {raw!r} does not compile: {exc}") from exc
    if compiled.fullmatch(b"") is not None:
        raise ConfigurationError(f"separator pattern {compiled.pattern!r} must not match an empty string")
    return compiled


def _coerce_enum(enum_type, value: Any, field: str):
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(f"Unsupported {field} '{value}'. Allowed: {allowed}") from exc


def _normalize_error_policy(value: Any, source: Path) -> str:
    policy = _require_string(value, "global.error_policy", source).lower()
    if policy not in {p.lower() for p in ALLOWED_ERROR_POLICIES}:
        allowed = ", ".join(sorted(ALLOWED_ERROR_POLICIES))
        raise ConfigurationError(f"Unsupported error_policy '{value}' in {source}. Allowed: {allowed}")
    return "fail-fast" if policy in {"fail-fast", "strict"} else "replace"


def _require_choice(value: Any, allowed: set, field: str, source: Path) -> str:
    text = _require_string(value, field, source)
    if text not in allowed:
        raise ConfigurationError(f"{field} must be one of {sorted(allowed)} in {source}")
    return text


def _require_string(value: Any, field: str, source: Path) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field} must be a string in {source}")
    text = value.strip()
    if not text:
        raise ConfigurationError(f"{field} must be non-empty in {source}")
    return text


def _require_positive_int(value: Any, field: str, source: Path) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field} must be an integer in {source}")
    try:
        num = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{field} must be an integer in {source}") from exc
    if num <= 0:
        raise ConfigurationError(f"{field} must be greater than zero in {source}")
    return num

# mermaid_pages/validate.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Tuple
from urllib.parse import urlsplit

from .assets import normalize_assets_dir
from .constants import MODES, STRATEGIES

Severity = Literal["error", "warning"]

KNOWN_KEYS: tuple[str, ...] = (
    "mode",
    "remote_url",
    "mermaid_version",
    "strategy",
    "language",
    "assets_dir",
    "search_paths",
    "dist_dir",
)

# The language tag ends up inside a class attribute and a regex.
LANGUAGE_RE = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class ValidationIssue:
    """One finding about a settings mapping; ``path`` points at the offending key."""

    severity: Severity
    code: str
    message: str
    path: str = ""
    hint: Optional[str] = None


@dataclass(frozen=True)
class ValidateConfig:
    """Issue codes to drop, and warning codes to report as errors."""

    ignore: set[str] = field(default_factory=set)
    escalate: set[str] = field(default_factory=set)


def validate_settings_issues(
    data: dict[str, Any], cfg: Optional[ValidateConfig] = None
) -> list[ValidationIssue]:
    """Return structured validation issues for a settings mapping."""

    cfg = cfg or ValidateConfig()
    issues: list[ValidationIssue] = []

    def emit(
        severity: Severity,
        code: str,
        message: str,
        path: str = "",
        hint: Optional[str] = None,
    ) -> None:
        if code in cfg.ignore:
            return
        final_severity: Severity = (
            "error" if (severity == "warning" and code in cfg.escalate) else severity
        )
        issues.append(
            ValidationIssue(
                severity=final_severity,
                code=code,
                message=message,
                path=path,
                hint=hint,
            )
        )

    for key in data:
        if key not in KNOWN_KEYS:
            emit(
                "warning",
                "W_UNKNOWN_KEY",
                f"unknown setting {key!r}; ignoring",
                path=f"/{key}",
                hint=f"known settings: {', '.join(KNOWN_KEYS)}",
            )

    mode = data.get("mode", "remote")
    if mode not in MODES:
        emit(
            "error",
            "E_MODE_INVALID",
            f"mode must be one of {', '.join(MODES)}, got {mode!r}",
            path="/mode",
        )

    strategy = data.get("strategy")
    if strategy is not None and strategy not in STRATEGIES:
        emit(
            "error",
            "E_STRATEGY_INVALID",
            f"strategy must be one of {', '.join(STRATEGIES)}, got {strategy!r}",
            path="/strategy",
        )

    language = data.get("language")
    if language is not None and not (isinstance(language, str) and LANGUAGE_RE.match(language)):
        emit(
            "error",
            "E_LANGUAGE_INVALID",
            f"language {language!r} is not a valid code-block tag (use [A-Za-z0-9_-])",
            path="/language",
        )

    for key in ("remote_url", "mermaid_version", "assets_dir", "dist_dir"):
        value = data.get(key)
        # YAML reads `mermaid_version: 11` as an int.
        if key == "mermaid_version" and isinstance(value, int) and not isinstance(value, bool):
            continue
        if value is not None and not isinstance(value, str):
            emit(
                "error",
                "E_NOT_STRING",
                f"{key} must be a string, got {type(value).__name__}",
                path=f"/{key}",
            )

    search_paths = data.get("search_paths")
    if search_paths is not None and not (
        isinstance(search_paths, list) and all(isinstance(p, str) for p in search_paths)
    ):
        emit(
            "error",
            "E_SEARCH_PATHS_NOT_LIST",
            "search_paths must be a list of directory paths",
            path="/search_paths",
        )

    remote_url = data.get("remote_url")
    if isinstance(remote_url, str):
        if mode == "local":
            emit(
                "warning",
                "W_REMOTE_URL_UNUSED",
                "remote_url is ignored when mode is 'local'",
                path="/remote_url",
            )
        scheme = urlsplit(remote_url).scheme
        if scheme != "https":
            emit(
                "warning",
                "W_REMOTE_URL_NOT_HTTPS",
                f"remote_url {remote_url!r} does not use https",
                path="/remote_url",
                hint="Module scripts from insecure origins are blocked on https sites.",
            )

    assets_dir = data.get("assets_dir")
    if isinstance(assets_dir, str):
        try:
            normalize_assets_dir(assets_dir)
        except ValueError as e:
            emit("error", "E_ASSETS_DIR_UNSAFE", str(e), path="/assets_dir")

    return issues


def validate_settings(data: dict[str, Any]) -> Tuple[list[str], list[str]]:
    """Return ``(errors, warnings)`` as message lists."""
    issues = validate_settings_issues(data)
    errors = [iss.message for iss in issues if iss.severity == "error"]
    warnings = [iss.message for iss in issues if iss.severity == "warning"]
    return errors, warnings

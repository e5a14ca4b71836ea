# src/validation/validator.py (v1)
"""Input gate in front of the lookup engine: sanitization and injection checks.

Text reaching TieredLookupEngine.resolve() is expected to have passed
validate_text(): sanitized, within the configured length limits, and free of
XSS / SQL injection patterns.
"""

from __future__ import annotations

import html
import re
from typing import Any, Literal

from pydantic import BaseModel

DEFAULT_MIN_CHARS = 10
DEFAULT_MAX_CHARS = 300

AttackType = Literal["XSS", "SQL_INJECTION", "INPUT_TOO_LARGE"]

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_WHITESPACE_RE = re.compile(r"\s+")
_PROTOCOL_RE = re.compile(r"(javascript|data|vbscript):", re.IGNORECASE)
_SPECIAL_RUN_RE = re.compile(r"""[!@#$%^&*()_+=\[\]{}|;':",./<>?`~]{10,}""")

_XSS_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.I), "XSS Script Tags"),
    (re.compile(r"javascript:", re.I), "XSS JavaScript Protocol"),
    (re.compile(r"on\w+\s*=", re.I), "XSS Event Handlers"),
    (re.compile(r"eval\s*\(", re.I), "XSS Eval Function"),
    (re.compile(r"expression\s*\(", re.I), "XSS CSS Expression"),
)

_SQL_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bunion\s+select\b", re.I), "SQL Union Select"),
    (re.compile(r"\bselect\s+.*\s+from\b", re.I), "SQL Select From"),
    (re.compile(r"\binsert\s+into\b", re.I), "SQL Insert Into"),
    (re.compile(r"\bupdate\s+.*\s+set\b", re.I), "SQL Update Set"),
    (re.compile(r"\bdelete\s+from\b", re.I), "SQL Delete From"),
    (re.compile(r"\bdrop\s+table\b", re.I), "SQL Drop Table"),
    (re.compile(r"\bcreate\s+table\b", re.I), "SQL Create Table"),
    (re.compile(r"\balter\s+table\b", re.I), "SQL Alter Table"),
    (re.compile(r"\bexec\s+\w+", re.I), "SQL Exec Command"),
    (re.compile(r"\bxp_cmdshell\b", re.I), "SQL Command Shell"),
    (re.compile(r"\bwaitfor\s+delay\b", re.I), "SQL Time-based Injection"),
    (re.compile(r"\bor\s+1\s*=\s*1\b", re.I), "SQL Boolean Injection"),
    (re.compile(r"\band\s+1\s*=\s*1\b", re.I), "SQL Boolean Injection"),
    (re.compile(r"'|\\'|;|--|/\*|\*/"), "SQL Injection Characters"),
)


class ValidationResult(BaseModel):
    """Outcome of validate_text / validate_request_body."""

    is_valid: bool
    error: str | None = None
    sanitized_text: str | None = None
    attack_type: AttackType | None = None
    attack_details: str | None = None


class InputValidationError(ValueError):
    """Raised by the facade when input fails validation."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        super().__init__(result.error or "Invalid input")


def sanitize_text(text: Any) -> str:
    """Strip control characters, HTML-escape, collapse whitespace, drop unsafe protocols."""
    if not isinstance(text, str) or not text:
        return ""
    sanitized = _CONTROL_CHARS_RE.sub("", text)
    sanitized = _escape_html(sanitized)
    sanitized = _WHITESPACE_RE.sub(" ", sanitized).strip()
    sanitized = _PROTOCOL_RE.sub("", sanitized)
    sanitized = _SPECIAL_RUN_RE.sub("", sanitized)
    return sanitized


def validate_text(
    text: Any,
    min_chars: int = DEFAULT_MIN_CHARS,
    max_chars: int = DEFAULT_MAX_CHARS,
) -> ValidationResult:
    """Sanitize text and check it against length limits and injection patterns."""
    if not isinstance(text, str) or not text:
        return ValidationResult(
            is_valid=False, error="Text is required and must be a string"
        )

    sanitized = sanitize_text(text)
    if not sanitized.strip():
        return ValidationResult(
            is_valid=False, error="Text cannot be empty after sanitization"
        )

    if len(sanitized) < min_chars:
        return ValidationResult(
            is_valid=False,
            error=f"Text must be at least {min_chars} characters long",
        )

    if len(sanitized) > max_chars:
        return ValidationResult(
            is_valid=False,
            error=f"Text must be less than {max_chars} characters long",
            attack_type="INPUT_TOO_LARGE",
            attack_details=f"Input length: {len(sanitized)} characters",
        )

    for pattern, label in _XSS_PATTERNS:
        if pattern.search(sanitized):
            return ValidationResult(
                is_valid=False,
                error=f"XSS attack detected: {label}",
                attack_type="XSS",
                attack_details=label,
            )

    for pattern, label in _SQL_PATTERNS:
        if pattern.search(sanitized):
            return ValidationResult(
                is_valid=False,
                error=f"SQL injection attack detected: {label}",
                attack_type="SQL_INJECTION",
                attack_details=label,
            )

    return ValidationResult(is_valid=True, sanitized_text=sanitized)


def validate_request_body(body: Any) -> ValidationResult:
    """Check a request payload carries exactly one non-empty 'text' field."""
    if not isinstance(body, dict):
        return ValidationResult(
            is_valid=False, error="Request body is required and must be an object"
        )
    if not body.get("text"):
        return ValidationResult(
            is_valid=False, error="Text field is required in request body"
        )
    extra = [k for k in body if k != "text"]
    if extra:
        return ValidationResult(
            is_valid=False,
            error=f"Unexpected fields in request: {', '.join(extra)}",
        )
    return ValidationResult(is_valid=True)


def _escape_html(text: str) -> str:
    # & < > " ' / \ and backtick become entities
    escaped = html.escape(text, quote=True)
    return escaped.replace("/", "&#x2F;").replace("\\", "&#x5C;").replace("`", "&#96;")

"""Project-name and signing-key validation.

``validate_project_name`` applies the npm registry naming rules (the rule set
of ``validate-npm-package-name``: errors and legacy-warnings both count as
violations for a new package) followed by the project's own length and
character-set rules.  All violations are collected, in that order.
"""

from __future__ import annotations

import re
from urllib.parse import quote

from pydantic import BaseModel, Field

from .errors import InvalidPrivateKey

MAX_NAME_LENGTH = 214

_NAME_CHARSET = re.compile(r"^[a-z0-9-._]+$")
_SCOPED_NAME = re.compile(r"^(?:@([^/]+?)[/])?([^/]+?)$")
_PRIVATE_KEY = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")

BLACKLISTED_NAMES = ("node_modules", "favicon.ico")

# Node.js core modules -- a package may not shadow one of these.
CORE_MODULE_NAMES = frozenset(
    {
        "assert", "async_hooks", "buffer", "child_process", "cluster",
        "console", "constants", "crypto", "dgram", "diagnostics_channel",
        "dns", "domain", "events", "fs", "http", "http2", "https",
        "inspector", "module", "net", "os", "path", "perf_hooks", "process",
        "punycode", "querystring", "readline", "repl", "stream",
        "string_decoder", "sys", "timers", "tls", "trace_events", "tty",
        "url", "util", "v8", "vm", "wasi", "worker_threads", "zlib",
    }
)


class ValidationResult(BaseModel):
    """Outcome of a name validation: ``valid`` plus ordered error messages."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


def _encode_uri_component(value: str) -> str:
    # Same unreserved set as JavaScript's encodeURIComponent.
    return quote(value, safe="!*'()")


def _registry_name_violations(name: str) -> list[str]:
    """Violations of the npm registry rules, errors first, then warnings."""
    errors: list[str] = []
    warnings: list[str] = []

    if not name:
        errors.append("name length must be greater than zero")
    if name.startswith("."):
        errors.append("name cannot start with a period")
    if name.startswith("_"):
        errors.append("name cannot start with an underscore")
    if name.strip() != name:
        errors.append("name cannot contain leading or trailing spaces")

    lowered = name.lower()
    for blacklisted in BLACKLISTED_NAMES:
        if lowered == blacklisted:
            errors.append(f"{blacklisted} is a blacklisted name")

    if lowered in CORE_MODULE_NAMES:
        warnings.append(f"{lowered} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        warnings.append(
            f"name can no longer contain more than {MAX_NAME_LENGTH} characters"
        )
    if lowered != name:
        warnings.append("name can no longer contain capital letters")
    if re.search(r"[~'!()*]", name.split("/")[-1]):
        warnings.append("name can no longer contain special characters (\"~'!()*\")")

    if _encode_uri_component(name) != name:
        match = _SCOPED_NAME.match(name)
        scoped_ok = bool(
            match
            and match.group(1) is not None
            and _encode_uri_component(match.group(1)) == match.group(1)
            and _encode_uri_component(match.group(2)) == match.group(2)
        )
        if not scoped_ok:
            errors.append("name can only contain URL-friendly characters")

    return errors + warnings


def validate_project_name(name: str) -> ValidationResult:
    """Validate *name* as a new project/package identifier.

    Returns ``valid=True`` with no errors, or ``valid=False`` with every
    violated rule's message.
    """
    errors = _registry_name_violations(name)

    if len(name) > MAX_NAME_LENGTH:
        errors.append(f"Project name must be {MAX_NAME_LENGTH} characters or less")

    if not _NAME_CHARSET.match(name):
        errors.append(
            "Project name can only contain lowercase letters, numbers, "
            "hyphens, dots, and underscores"
        )

    return ValidationResult(valid=not errors, errors=errors)


def is_private_key(value: str) -> bool:
    """``True`` for 64 hex digits, with or without a ``0x`` prefix."""
    return bool(_PRIVATE_KEY.match(value))


def normalize_private_key(value: str) -> str:
    """Validate a signing key and return it without its ``0x`` prefix.

    Raises:
        InvalidPrivateKey: If the key is empty or not 64 hex digits.
    """
    value = value.strip()
    if not value:
        raise InvalidPrivateKey("Private key is required")
    if not is_private_key(value):
        raise InvalidPrivateKey("Invalid private key format")
    return value[2:] if value.startswith("0x") else value

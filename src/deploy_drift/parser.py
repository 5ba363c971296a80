"""Declaration file parser.

Extracts the component name, container version and environment variables
from the text of one declaration file. Parsing is line oriented and never
raises for unrelated or malformed input: missing fields come back empty and
the caller decides whether the file describes a component at all.

Example input:

    app_name          = "payments-api"
    container_version = "1.4.2"
    environment_vars = {
      "LOG_LEVEL" = "info"
      "REGION"    = "eu-west-1"
    }
"""

import re
from dataclasses import dataclass, field

from .constants import (
    APP_NAME_PREFIX,
    CONTAINER_VERSION_PREFIX,
    ENV_BLOCK_CLOSE,
    ENV_BLOCK_OPEN,
    ENV_LINE_STRIP_CHARS,
)

_WHITESPACE = re.compile(r"\s+")


@dataclass
class ParsedDeclaration:
    """Fields extracted from a single declaration file."""

    component: str | None = None
    version: str | None = None
    env_vars: dict[str, str] = field(default_factory=dict)

    @property
    def is_component(self) -> bool:
        """True when both a name and a version were found."""
        return bool(self.component) and bool(self.version)


def _unquote(value: str) -> str:
    return value.strip('"')


def extract_component_fields(text: str) -> tuple[str | None, str | None]:
    """
    Extract component name and container version.

    Every line has all whitespace removed before matching, so
    ``app_name = "svc"`` and ``app_name="svc"`` are equivalent. The value is
    everything after the first ``=``. When a key appears more than once the
    last occurrence wins.

    Args:
        text: Declaration file contents

    Returns:
        (component, version); either may be None
    """
    component: str | None = None
    version: str | None = None

    for raw_line in text.splitlines():
        line = _WHITESPACE.sub("", raw_line)
        if line.startswith(APP_NAME_PREFIX):
            component = _unquote(line.split("=", 1)[1])
        elif line.startswith(CONTAINER_VERSION_PREFIX):
            version = _unquote(line.split("=", 1)[1])

    return component, version


def extract_env_vars(text: str) -> dict[str, str]:
    """
    Extract the ``environment_vars = { ... }`` block.

    The block starts at the first line equal to ``environment_vars = {`` and
    ends at the first line that is exactly ``}`` once trimmed. Nested braces
    are not supported. Lines without ``=`` are ignored, as are pairs whose key
    or value is empty after quotes and commas are removed.

    Args:
        text: Declaration file contents

    Returns:
        Mapping of variable name to value (empty when there is no block or
        the block is never closed)
    """
    env_vars: dict[str, str] = {}
    in_block = False

    for raw_line in text.splitlines():
        line = raw_line.strip()

        if not in_block:
            if _WHITESPACE.sub("", line) == ENV_BLOCK_OPEN:
                in_block = True
            continue

        if line == ENV_BLOCK_CLOSE:
            return env_vars

        if "=" not in line:
            continue

        cleaned = line.translate(str.maketrans("", "", ENV_LINE_STRIP_CHARS))
        key, value = cleaned.split("=", 1)
        key = key.strip()
        value = value.strip()
        if key and value:
            env_vars[key] = value

    return {}


def parse_declaration(text: str) -> ParsedDeclaration:
    """
    Parse one declaration file.

    Args:
        text: Declaration file contents

    Returns:
        ParsedDeclaration; check ``is_component`` before using it as a record
    """
    component, version = extract_component_fields(text)
    return ParsedDeclaration(
        component=component,
        version=version,
        env_vars=extract_env_vars(text),
    )

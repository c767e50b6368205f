"""
Regex replacement rules shared by URL rewriting and value post-processing.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from app.scraping.errors import ScraperConfigurationError

# $1, ${1}, ${name}, $name and $$ as written in scraper definition files.
GROUP_REFERENCE_REGEX = re.compile(r"\$(?:(\$)|\{(\w+)\}|(\w+))")


@dataclass(frozen=True)
class ReplacementRule:
    """
    One compiled regex substitution.
    """

    pattern: re.Pattern[str]
    replacement: str

    @classmethod
    def compile(cls, regex: str, replacement: str) -> ReplacementRule:
        try:
            pattern = re.compile(regex)
        except re.error as exc:
            raise ScraperConfigurationError(f"Invalid replacement regex '{regex}': {exc}") from exc
        return cls(pattern=pattern, replacement=_python_template(replacement, pattern))

    def apply(self, value: str) -> str:
        return self.pattern.sub(self.replacement, value)


def apply_replacements(value: str, rules: Iterable[ReplacementRule]) -> str:
    """
    Apply every rule in order over the whole string.
    """

    for rule in rules:
        value = rule.apply(value)
    return value


def _python_template(replacement: str, pattern: re.Pattern[str]) -> str:
    escaped = replacement.replace("\\", "\\\\")

    def _swap(match: re.Match[str]) -> str:
        if match.group(1):
            return "$"
        name = match.group(2) or match.group(3)
        if name.isdigit():
            # unknown groups expand to nothing
            return f"\\g<{name}>" if int(name) <= pattern.groups else ""
        return f"\\g<{name}>" if name in pattern.groupindex else ""

    return GROUP_REFERENCE_REGEX.sub(_swap, escaped)

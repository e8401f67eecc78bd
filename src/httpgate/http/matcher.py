"""
=============================================================================
PATH MATCHER
=============================================================================

Decides whether a registered route pattern matches a concrete request
path.

=============================================================================
PATTERN FORMS
=============================================================================

1. LITERAL PATHS: exact string equality

   Pattern: /api/users
   Matches: /api/users
   Doesn't match: /api/users/, /api/user

2. TRAILING PLACEHOLDER: last segment starts with ":"

   Pattern: /api/users/:id
            ──────┬─── ─┬─
                  │     └── placeholder (name "id")
                  └──────── prefix "/api/users"

   Only ONE placeholder is allowed and it must be the LAST segment.
   "/api/:kind/list" and "/api/:a/:b" are rejected at registration.

=============================================================================
PREFIX MATCHING (DEFAULT)
=============================================================================

A placeholder pattern matches any path that STARTS WITH its prefix:

    pattern /api/users/:id

    /api/users/123          ✓   params {"id": "123"}
    /api/users/123/extra    ✓   params {"id": "123/extra"}
    /api/users              ✓   params {"id": ""}
    /api/usersX             ✓   params {"id": "X"}
    /other                  ✗

This is looser than one-segment matching and is kept on purpose so that
existing clients keep working. First-match-wins ordering in the registry
is what keeps "/api/users" going to its own literal route: register the
literal BEFORE the placeholder route.

=============================================================================
STRICT MATCHING (OPT-IN)
=============================================================================

With strict=True the placeholder is compiled to a one-segment capture:

    /api/users/:id  →  ^/api/users/(?P<id>[^/]+)$

    /api/users/123          ✓
    /api/users/123/extra    ✗
    /api/users              ✗

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Pattern
import re


PLACEHOLDER_MARKER = ":"


@dataclass(frozen=True)
class PathPattern:
    """
    A route pattern prepared for matching.

    Built once at registration time with PathPattern.compile(); matching
    then costs a string comparison (or one regex match in strict mode).

    Attributes:
        raw: The pattern as registered ("/api/users/:id").
        prefix: Text before the placeholder ("/api/users"), or the whole
                pattern when there is no placeholder.
        param_name: Placeholder name ("id"), None for literal patterns.
        strict: One-segment matching instead of prefix matching.
    """

    raw: str
    prefix: str
    param_name: Optional[str] = None
    strict: bool = False
    _regex: Optional[Pattern] = field(default=None, repr=False, compare=False)

    @classmethod
    def compile(cls, pattern: str, strict: bool = False) -> "PathPattern":
        """
        Validate and compile a route pattern.

        Raises:
            ValueError: The pattern has a placeholder that is not the last
                        segment, more than one placeholder, or a
                        placeholder name that is not an identifier.
        """
        segments = pattern.split("/")
        placeholders = [
            i for i, segment in enumerate(segments)
            if segment.startswith(PLACEHOLDER_MARKER)
        ]

        if not placeholders:
            return cls(raw=pattern, prefix=pattern, strict=strict)

        if len(placeholders) > 1:
            raise ValueError(f"Only one placeholder is supported: {pattern!r}")

        index = placeholders[0]
        if index != len(segments) - 1:
            raise ValueError(f"Placeholder must be the last segment: {pattern!r}")

        name = segments[index][len(PLACEHOLDER_MARKER):]
        if not name.isidentifier():
            raise ValueError(f"Placeholder name must be an identifier: {pattern!r}")

        prefix = "/".join(segments[:index])
        regex = None
        if strict:
            regex = re.compile(f"^{re.escape(prefix)}/(?P<{name}>[^/]+)$")

        return cls(raw=pattern, prefix=prefix, param_name=name, strict=strict, _regex=regex)

    @property
    def has_placeholder(self) -> bool:
        return self.param_name is not None

    def matches(self, path: str) -> bool:
        """Check whether ``path`` is matched by this pattern."""
        if path == self.raw:
            return True
        if not self.has_placeholder:
            return False
        if self._regex is not None:
            return self._regex.match(path) is not None
        return path.startswith(self.prefix)

    def params(self, path: str) -> Dict[str, str]:
        """
        Extract the placeholder value from a matching ``path``.

        Returns an empty dict for literal patterns or non-matching paths.
        In prefix mode the value is everything after the prefix, minus
        one leading slash.
        """
        if not self.has_placeholder or not self.matches(path):
            return {}
        if self._regex is not None:
            return self._regex.match(path).groupdict()
        value = path[len(self.prefix):]
        if value.startswith("/"):
            value = value[1:]
        return {self.param_name: value}

    def __str__(self) -> str:
        return self.raw


def path_matches(pattern: str, path: str, strict: bool = False) -> bool:
    """
    Check whether a route pattern matches a concrete path.

    Example:
        >>> path_matches("/api/users/:id", "/api/users/123")
        True
        >>> path_matches("/api/users/:id", "/api/users/123/extra")
        True
        >>> path_matches("/api/users/:id", "/other")
        False
    """
    return PathPattern.compile(pattern, strict=strict).matches(path)

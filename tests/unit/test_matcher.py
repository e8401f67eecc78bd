"""
Unit tests for route pattern matching.
"""

import pytest

from httpgate.http.matcher import PathPattern, path_matches


class TestPathMatches:
    """Tests for the default (prefix) matching."""

    def test_exact_literal(self):
        assert path_matches("/api/users", "/api/users")

    def test_literal_mismatch(self):
        assert not path_matches("/api/users", "/api/user")
        assert not path_matches("/api/users", "/api/users/1")

    def test_placeholder_matches_value(self):
        assert path_matches("/api/users/:id", "/api/users/123")

    def test_placeholder_prefix_laxity(self):
        """Test that anything under the prefix matches."""
        assert path_matches("/api/users/:id", "/api/users/123/extra")
        assert path_matches("/api/users/:id", "/api/usersX")
        assert path_matches("/api/users/:id", "/api/users")

    def test_placeholder_other_path(self):
        assert not path_matches("/api/users/:id", "/other")
        assert not path_matches("/api/users/:id", "/api/use")

    def test_pattern_itself_matches(self):
        assert path_matches("/api/users/:id", "/api/users/:id")


class TestStrictMatching:
    """Tests for one-segment placeholder matching."""

    def test_single_segment(self):
        assert path_matches("/api/users/:id", "/api/users/123", strict=True)

    def test_rejects_extra_segments(self):
        assert not path_matches("/api/users/:id", "/api/users/123/extra", strict=True)

    def test_rejects_empty_value(self):
        assert not path_matches("/api/users/:id", "/api/users/", strict=True)
        assert not path_matches("/api/users/:id", "/api/users", strict=True)

    def test_rejects_glued_prefix(self):
        assert not path_matches("/api/users/:id", "/api/usersX", strict=True)

    def test_escapes_prefix(self):
        assert path_matches("/v1.0/:id", "/v1.0/7", strict=True)
        assert not path_matches("/v1.0/:id", "/v1x0/7", strict=True)


class TestPathPattern:
    """Tests for PathPattern compilation and parameters."""

    def test_compile_literal(self):
        pattern = PathPattern.compile("/api/time")

        assert pattern.prefix == "/api/time"
        assert pattern.param_name is None
        assert not pattern.has_placeholder

    def test_compile_placeholder(self):
        pattern = PathPattern.compile("/api/users/:id")

        assert pattern.prefix == "/api/users"
        assert pattern.param_name == "id"
        assert str(pattern) == "/api/users/:id"

    def test_params_lax(self):
        pattern = PathPattern.compile("/api/users/:id")

        assert pattern.params("/api/users/2") == {"id": "2"}
        assert pattern.params("/api/users/2/extra") == {"id": "2/extra"}
        assert pattern.params("/other") == {}

    def test_params_strict(self):
        pattern = PathPattern.compile("/api/users/:user_id", strict=True)

        assert pattern.params("/api/users/42") == {"user_id": "42"}
        assert pattern.params("/api/users/42/x") == {}

    def test_params_literal(self):
        assert PathPattern.compile("/admin").params("/admin") == {}

    def test_root_placeholder(self):
        pattern = PathPattern.compile("/:slug", strict=True)

        assert pattern.matches("/hello")
        assert pattern.params("/hello") == {"slug": "hello"}

    @pytest.mark.parametrize("bad", [
        "/api/:version/users",
        "/api/:a/:b",
        "/api/users/:",
        "/api/users/:1st",
        "/api/users/:user-id",
    ])
    def test_invalid_patterns(self, bad: str):
        with pytest.raises(ValueError):
            PathPattern.compile(bad)

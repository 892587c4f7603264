"""Tests for the Jinja2 template renderer (gentree.engine.templates)."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import TemplateNotFound, UndefinedError

from gentree.engine.templates import (
    TemplateRenderer,
    _camel_case_filter,
    _pascal_case_filter,
    _slugify_filter,
    _snake_case_filter,
)


pytestmark = pytest.mark.unit


class TestTemplateRenderer:
    def test_render(self, templates_dir: Path):
        renderer = TemplateRenderer(templates_dir)
        assert renderer.render("README.md.j2", {"arg0": "demo"}) == "# demo\n\nNo description.\n"

    def test_undefined_variable_raises(self, templates_dir: Path):
        renderer = TemplateRenderer(templates_dir)
        with pytest.raises(UndefinedError):
            renderer.render("broken.j2", {})

    def test_missing_template_raises(self, templates_dir: Path):
        with pytest.raises(TemplateNotFound):
            TemplateRenderer(templates_dir).render("nope.j2", {})

    async def test_render_to_file_creates_parents(self, templates_dir: Path, tmp_path: Path):
        out = tmp_path / "deep" / "dir" / "README.md"
        written = await TemplateRenderer(templates_dir).render_to_file(
            "README.md.j2", out, {"arg0": "x", "description": "Hello"}
        )
        assert written == out
        assert out.read_text(encoding="utf-8") == "# x\n\nHello\n"


class TestFilters:
    @pytest.mark.parametrize(
        "value, expected",
        [("Hello World", "hello-world"), ("  --A_b--  ", "a-b"), ("2FA (TOTP)", "2fa-totp")],
    )
    def test_slugify(self, value, expected):
        assert _slugify_filter(value) == expected

    def test_pascal_case(self):
        assert _pascal_case_filter("user-profile_view") == "UserProfileView"

    def test_snake_case(self):
        assert _snake_case_filter("UserProfile") == "user_profile"
        assert _snake_case_filter("user-profile") == "user_profile"

    def test_camel_case(self):
        assert _camel_case_filter("user_profile") == "userProfile"
        assert _camel_case_filter("") == ""

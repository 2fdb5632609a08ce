"""
Tests for asset placeholders, injection and export path rewriting.
"""

import pytest

from app.ai.site.assets import (
    BACKGROUND_PLACEHOLDER,
    LOGO_PLACEHOLDER,
    inject_assets,
    is_asset_reference,
    rewrite_upload_paths,
    strip_code_fences,
)
from app.ai.site.generator.contracts import Brief
from app.ai.site.validation import validate_document

from tests.conftest import VALID_PAGE


class TestIsAssetReference:

    @pytest.mark.parametrize("value", [
        "data:image/png;base64,iVBORw0KGgo=",
        "data:image/svg+xml;charset=utf-8,%3Csvg%3E",
        "/uploads/1718000000000-logo.png",
    ])
    def test_accepted_references(self, value):
        assert is_asset_reference(value) is True

    @pytest.mark.parametrize("value", [
        None,
        "",
        "https://example.com/logo.png",
        "//cdn.example.com/logo.png",
        "/uploads/../secret.txt",
        "data:text/html,<script>",
        "javascript:alert(1)",
    ])
    def test_rejected_references(self, value):
        assert is_asset_reference(value) is False


class TestStripCodeFences:

    def test_removes_markdown_fences(self):
        raw = "```html\n<!DOCTYPE html><html></html>\n```"

        assert strip_code_fences(raw) == "<!DOCTYPE html><html></html>"

    def test_plain_document_unchanged(self):
        assert strip_code_fences(VALID_PAGE) == VALID_PAGE.strip()

    def test_empty_input(self):
        assert strip_code_fences("") == ""


class TestInjectAssets:

    def test_logo_and_background_are_spliced_in(self, brief_with_assets):
        html = inject_assets(VALID_PAGE, brief_with_assets)

        assert LOGO_PLACEHOLDER not in html
        assert BACKGROUND_PLACEHOLDER not in html
        assert '<img class="obrix-logo" src="/uploads/1718000000000-logo.png" alt="Moon Cat logo"' in html
        assert "url('data:image/png;base64,iVBORw0KGgo=')" in html

    def test_missing_assets_remove_placeholders(self, brief):
        html = inject_assets(VALID_PAGE, brief)

        assert LOGO_PLACEHOLDER not in html
        assert BACKGROUND_PLACEHOLDER not in html
        assert "<img" not in html
        assert "background-image: none;" in html

    def test_loosely_written_logo_comment_is_replaced(self, brief_with_assets):
        html = inject_assets("<!DOCTYPE html><body><!-- OBRIX_LOGO_HERE --></body>", brief_with_assets)

        assert "obrix-logo" in html

    def test_bare_background_token_is_replaced(self, brief_with_assets):
        html = inject_assets(f'<div data-bg="{BACKGROUND_PLACEHOLDER}"></div>', brief_with_assets)

        assert 'data-bg="data:image/png;base64,iVBORw0KGgo="' in html

    def test_injection_is_idempotent(self, brief_with_assets):
        once = inject_assets(VALID_PAGE, brief_with_assets)

        assert inject_assets(once, brief_with_assets) == once

    def test_injected_page_still_validates(self, brief_with_assets):
        assert validate_document(inject_assets(VALID_PAGE, brief_with_assets)).passed

    def test_alt_text_is_escaped(self):
        brief = Brief(name='Cat "Moon" <3', logo="/uploads/logo.png")

        html = inject_assets(LOGO_PLACEHOLDER, brief)

        assert 'alt="Cat &quot;Moon&quot; &lt;3 logo"' in html

    def test_remote_reference_is_refused(self):
        brief = Brief(name="Moon Cat", logo="https://cdn.example.com/logo.png")

        with pytest.raises(ValueError):
            inject_assets(VALID_PAGE, brief)


class TestRewriteUploadPaths:

    def test_upload_paths_point_at_assets_folder(self):
        html = ('<img src="/uploads/1-logo.png">'
                "<style>body{background:url('/uploads/2-bg.jpg')}</style>"
                '<img src="/uploads/1-logo.png">')

        rewritten, names = rewrite_upload_paths(html)

        assert "/uploads/" not in rewritten
        assert 'src="assets/1-logo.png"' in rewritten
        assert "url('assets/2-bg.jpg')" in rewritten
        assert names == ["1-logo.png", "2-bg.jpg"]

    def test_absolute_urls_are_left_alone(self):
        html = '<a href="https://example.com/uploads/file.png">x</a>'

        rewritten, names = rewrite_upload_paths(html)

        assert rewritten == html
        assert names == []

"""Tests for stylesheet text transforms."""

import pytest

from csspruner.transforms import BUILTIN_TRANSFORMS, apply_transforms
from csspruner.transforms.font_display import FontDisplaySwapTransform, apply_font_display_swap
from csspruner.transforms.minify import MinifyTransform, minify


# ---------------------------------------------------------------------------
# minify
# ---------------------------------------------------------------------------


class TestMinify:
    def test_strips_comments(self):
        assert minify("/* header */.a{x:1}") == ".a{x:1}"

    def test_strips_multiline_comments(self):
        css = ".a{x:1}\n/*\n * block\n */\n.b{x:2}"
        assert minify(css) == ".a{x:1}.b{x:2}"

    def test_collapses_whitespace(self):
        css = ".a  .b {\n  color : red ;\n  margin: 0  auto;\n}\n"
        assert minify(css) == ".a .b{color :red;margin:0 auto;}"

    def test_removes_space_around_punctuation(self):
        assert minify("ul > li , ol > li { x: 1 }") == "ul>li,ol>li{x:1}"

    def test_keeps_descendant_pseudo_space(self):
        assert minify(".a :hover{x:1}") == ".a :hover{x:1}"

    def test_keeps_space_before_media_feature(self):
        css = "@media screen and ( min-width: 768px ) { .a { x: 1 } }"
        assert minify(css) == "@media screen and (min-width:768px){.a{x:1}}"

    def test_calc_spaces_kept(self):
        assert minify(".a{width:calc(100% - 2px)}") == ".a{width:calc(100% - 2px)}"

    def test_comment_inside_string_kept(self):
        css = '.a::before { content: "/* not a comment */"; }'
        assert minify(css) == '.a::before{content:"/* not a comment */";}'

    def test_whitespace_inside_string_kept(self):
        assert minify(".a{content:'a   b'}") == ".a{content:'a   b'}"

    def test_unterminated_comment(self):
        assert minify(".a{x:1}/* open") == ".a{x:1}"

    def test_escape_preserved(self):
        assert minify(r".sm\:p-2 { x: 1 }") == r".sm\:p-2{x:1}"

    def test_empty(self):
        assert minify("") == ""
        assert minify("  /* only a comment */  ") == ""

    @pytest.mark.parametrize(
        "css",
        [
            ".a  .b {\n  color : red ;\n}\n",
            '.a::before { content: "/* x */  y"; }',
            "@media screen and (max-width: 600px) { .a { x: 1 } }",
            r".sm\:p-2 .x { x: 1 } .\31 0 { y: 2 }",
            ".a{x:1}/* open",
            "'unterminated\n.a { x: 1 }",
        ],
    )
    def test_idempotent(self, css):
        once = minify(css)
        assert minify(once) == once

    def test_transform_wrapper(self):
        assert MinifyTransform().apply(" .a { x: 1 } ") == ".a{x:1}"


# ---------------------------------------------------------------------------
# font-display patch
# ---------------------------------------------------------------------------


class TestFontDisplaySwap:
    def test_injects_when_missing(self):
        css = '@font-face{font-family:"X";src:url(a.woff)}'
        result = apply_font_display_swap(css)
        assert result == '@font-face{font-family:"X";src:url(a.woff);font-display:swap;}'
        assert result.count("font-display:swap;") == 1

    def test_injects_after_trailing_semicolon(self):
        css = '@font-face{font-family:"X";}'
        assert apply_font_display_swap(css) == '@font-face{font-family:"X";font-display:swap;}'

    def test_existing_value_untouched(self):
        css = '@font-face{font-family:"X";src:url(a.woff);font-display:block;}'
        assert apply_font_display_swap(css) == css

    def test_other_rules_untouched(self):
        css = '.a{x:1}@font-face{font-family:"X"}.b{y:2}'
        assert apply_font_display_swap(css) == '.a{x:1}@font-face{font-family:"X";font-display:swap;}.b{y:2}'

    def test_every_font_face_patched(self):
        css = "@font-face{font-family:A}@font-face{font-family:B}"
        assert apply_font_display_swap(css).count("font-display:swap;") == 2

    def test_patch_is_idempotent(self):
        once = apply_font_display_swap("@font-face{font-family:A}")
        assert apply_font_display_swap(once) == once

    def test_no_font_face(self):
        css = ".a{x:1}"
        assert apply_font_display_swap(css) is css

    def test_transform_wrapper(self):
        assert "font-display:swap;" in FontDisplaySwapTransform().apply("@font-face{src:url(a)}")


# ---------------------------------------------------------------------------
# apply_transforms pipeline
# ---------------------------------------------------------------------------


class TestApplyTransforms:
    def test_builtin_font_display(self):
        assert len(BUILTIN_TRANSFORMS) == 1
        assert apply_transforms("@font-face{src:url(a)}") == "@font-face{src:url(a);font-display:swap;}"

    def test_custom_transforms_appended(self):
        class Upper:
            def apply(self, css: str) -> str:
                return css.upper()

        result = apply_transforms("@font-face{src:url(a)}", custom_transforms=[Upper()])
        assert result == "@FONT-FACE{SRC:URL(A);FONT-DISPLAY:SWAP;}"

"""Tests for targeted-change prompt assembly."""
import pytest

from channelsite.core.exceptions import TargetNotFoundError
from channelsite.editing.targeting import (
    BASE_PRESERVATION_RULES,
    build_targeted_change,
    create_preservation_rules,
    determine_change_scope,
    identify_target_element,
)
from channelsite.llm.prompts.edit_prompts import CODE_CONTEXT_CHARS

PROJECT_ID = "8a6e0804-2bd0-4672-b79d-d97027f9071a"


@pytest.mark.parametrize("request_text, scope", [
    ("change the title text", "minimal"),
    ("make the footer color darker", "minimal"),
    ("redo the layout of the page", "section"),
    ("make the button bounce", "component"),
])
def test_determine_change_scope(request_text, scope):
    assert determine_change_scope(request_text) == scope


@pytest.mark.parametrize("request_text, element", [
    ("bigger heading", "hero"),
    ("update the navbar", "navigation"),
    ("show subscriber numbers", "stats"),
    ("something vague", "general-element"),
])
def test_identify_target_element(request_text, element):
    assert identify_target_element(request_text) == element


def test_preservation_rules_follow_page_sections(sample_page):
    rules = create_preservation_rules(sample_page)

    assert rules[:len(BASE_PRESERVATION_RULES)] == BASE_PRESERVATION_RULES
    assert "Preserve navigation bar structure and styling" in rules
    assert "Keep video gallery layout and functionality" in rules
    assert "Maintain statistics section with real data" not in rules


def test_preservation_rules_without_code():
    assert create_preservation_rules(None) == BASE_PRESERVATION_RULES


class TestBuildTargetedChange:

    def test_footer_change(self, sample_page, sample_channel):
        change = build_targeted_change(
            "make the footer darker", PROJECT_ID, sample_channel, sample_page
        )

        assert change.target_component == "footer"
        assert change.change_scope == "component"
        assert change.preservation_rules[0] == "NEVER modify components other than footer"
        assert change.component_map["footer"] == {
            "file": "index.html", "selector": "footer", "type": "footer"
        }

    def test_rules_quote_the_page_colors(self, sample_page):
        change = build_targeted_change("make the footer darker", PROJECT_ID, None, sample_page)
        assert "#e11d48" in change.preservation_rules[2]

    def test_prompt_contents(self, sample_page, sample_channel):
        change = build_targeted_change(
            "make the footer darker", PROJECT_ID, sample_channel, sample_page
        )

        assert '- Request: "make the footer darker"' in change.prompt
        assert f"- Project ID: {PROJECT_ID}" in change.prompt
        assert "- Channel: Test Kitchen" in change.prompt
        assert '<footer class="site-footer">' in change.prompt

    def test_keyword_for_missing_component_uses_page_rules(self):
        html = "<html><body><header><h1>Only a header</h1></header></body></html>"
        change = build_targeted_change("make the footer darker", PROJECT_ID, None, html)

        assert change.target_component == "footer"
        assert change.preservation_rules == BASE_PRESERVATION_RULES

    def test_unidentifiable_request(self, sample_page):
        with pytest.raises(TargetNotFoundError):
            build_targeted_change("do something nice", PROJECT_ID, None, sample_page)


def _code_context(prompt):
    block = prompt.split("## CURRENT CODE STRUCTURE\n```html\n", 1)[1]
    return block.split("\n```", 1)[0]


class TestCodeContext:

    def test_long_page_is_truncated(self):
        filler = "<p>" + "x" * 3000 + "</p>"
        html = f"<html><body>{filler}<footer>Bye</footer></body></html>"

        change = build_targeted_change("make the footer darker", PROJECT_ID, None, html)
        context = _code_context(change.prompt)

        assert context == html[:CODE_CONTEXT_CHARS] + "..."
        assert len(context) == CODE_CONTEXT_CHARS + 3

    def test_short_page_is_sent_whole(self):
        html = "<html><body><footer>Bye</footer></body></html>"

        change = build_targeted_change("make the footer darker", PROJECT_ID, None, html)

        assert _code_context(change.prompt) == html

    def test_page_at_the_limit_has_no_ellipsis(self):
        html = "<html><body><footer>Bye</footer></body></html>"
        html = html.replace("<body>", "<body>" + " " * (CODE_CONTEXT_CHARS - len(html)))

        change = build_targeted_change("make the footer darker", PROJECT_ID, None, html)

        assert len(html) == CODE_CONTEXT_CHARS
        assert _code_context(change.prompt) == html

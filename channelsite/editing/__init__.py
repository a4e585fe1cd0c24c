"""
Editing package - Targeted, component-level website edits.

- component_mapper: regex map of the page's named components
- intent_parser: chat request -> structured edit intent
- targeting: prompt for an LLM-driven targeted edit
- editor: BeautifulSoup DOM edits and validation
- fallback_template: static site when no provider answers
"""
from channelsite.editing.component_mapper import (
    ComponentMapper,
    ComponentMapEntry,
    DesignTokens,
    extract_css,
)
from channelsite.editing.intent_parser import (
    IntentParser,
    ComponentIntent,
    IntentUpdates,
    ParseResult,
)
from channelsite.editing.targeting import (
    TargetedChange,
    build_targeted_change,
    create_preservation_rules,
    determine_change_scope,
    identify_target_element,
)
from channelsite.editing.editor import HTMLEditor, EditResult, extract_html_document
from channelsite.editing.fallback_template import FallbackResult, generate_fallback_site

__all__ = [
    "ComponentMapper",
    "ComponentMapEntry",
    "DesignTokens",
    "extract_css",
    "IntentParser",
    "ComponentIntent",
    "IntentUpdates",
    "ParseResult",
    "TargetedChange",
    "build_targeted_change",
    "create_preservation_rules",
    "determine_change_scope",
    "identify_target_element",
    "HTMLEditor",
    "EditResult",
    "extract_html_document",
    "FallbackResult",
    "generate_fallback_site",
]

"""
Targeting - Builds the prompt for a targeted (component-level) edit.

build_targeted_change() is what the generation service calls when a
project already has code: it maps the page, picks the component the
request is about, collects preservation rules and assembles the prompt.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from channelsite.core.exceptions import TargetNotFoundError
from channelsite.core.logging_config import get_logger
from channelsite.editing.component_mapper import ComponentMapper, extract_css
from channelsite.llm.prompts.edit_prompts import get_targeted_change_prompt

logger = get_logger(__name__)

TARGET_ELEMENTS = [
    ("hero", ["hero", "title", "heading", "main title", "banner"]),
    ("navigation", ["nav", "menu", "navigation", "navbar", "header"]),
    ("video-section", ["video", "gallery", "content", "videos"]),
    ("stats", ["stats", "statistics", "numbers", "subscriber", "count"]),
    ("footer", ["footer", "bottom", "contact"]),
    ("button", ["button", "cta", "call to action", "subscribe"]),
    ("color", ["color", "background", "theme", "style"]),
    ("text", ["text", "content", "description", "paragraph"]),
]

BASE_PRESERVATION_RULES = [
    "Preserve all existing HTML structure outside target element",
    "Maintain current CSS styling and responsive design",
    "Keep all JavaScript functionality intact",
    "Preserve YouTube channel data integration",
    "Maintain existing color schemes and typography",
    "Keep navigation and footer sections unchanged",
]


@dataclass
class TargetedChange:
    prompt: str
    preservation_rules: List[str]
    target_component: str
    change_scope: str
    component_map: Dict[str, Dict[str, str]] = field(default_factory=dict)


def determine_change_scope(user_request: str) -> str:
    """minimal, section or component, by keyword."""
    request = user_request.lower()

    if any(k in request for k in ("text", "word", "title", "color")):
        return "minimal"
    if any(k in request for k in ("section", "layout", "entire")):
        return "section"
    return "component"


def identify_target_element(user_request: str) -> str:
    """Coarse label for what a request touches; "general-element" if unclear."""
    request = user_request.lower()
    for element, keywords in TARGET_ELEMENTS:
        if any(k in request for k in keywords):
            return element
    return "general-element"


def create_preservation_rules(current_code: Optional[str]) -> List[str]:
    """Base rules plus rules for the sections present in the page."""
    rules = list(BASE_PRESERVATION_RULES)
    code = current_code or ""

    if "navbar" in code:
        rules.append("Preserve navigation bar structure and styling")
    if "video-gallery" in code:
        rules.append("Keep video gallery layout and functionality")
    if "stats" in code:
        rules.append("Maintain statistics section with real data")

    return rules


def build_targeted_change(
    user_request: str,
    project_id: str,
    channel: Optional[Dict[str, Any]],
    current_code: str
) -> TargetedChange:
    """
    Build the targeted-edit prompt for a request against the current page.

    Raises:
        TargetNotFoundError: If no component can be identified
    """
    mapper = ComponentMapper()
    component_map = mapper.parse_html_structure(current_code)
    target_component = mapper.identify_target_component(user_request)
    change_scope = determine_change_scope(user_request)

    if not target_component:
        raise TargetNotFoundError(user_request)

    # Tokens come from the page itself so the rules quote its real colors
    mapper.design_tokens = mapper.extract_design_tokens(extract_css(current_code))
    rules = mapper.get_preservation_rules(target_component)
    if not rules:
        # Keyword matched a component the page doesn't have
        rules = create_preservation_rules(current_code)

    map_dict = {key: entry.to_dict() for key, entry in component_map.items()}

    prompt = get_targeted_change_prompt(
        user_request=user_request,
        project_id=project_id,
        target_component=target_component,
        change_scope=change_scope,
        component_map=map_dict,
        design_tokens=mapper.design_tokens.to_dict(),
        preservation_rules=rules,
        component_code=mapper.extract_component_code(
            current_code, mapper.get_component(target_component)
        ),
        current_code=current_code,
        channel=channel,
    )

    logger.info(f"Targeted change prepared: target={target_component}, scope={change_scope}")

    return TargetedChange(
        prompt=prompt,
        preservation_rules=rules,
        target_component=target_component,
        change_scope=change_scope,
        component_map=map_dict,
    )

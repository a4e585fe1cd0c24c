"""
Intent Parser - Turns a chat request into a structured component edit.

Given "make the subscribe button bigger and red", the parser decides
which component is meant, what kind of change it is, and which concrete
updates (classes, inline styles, text) to apply. The result can be
applied directly with HTMLEditor or folded into an LLM prompt.
"""
import json
import re
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from channelsite.core.logging_config import get_logger
from channelsite.editing.component_mapper import ComponentMapEntry, DesignTokens

logger = get_logger(__name__)

COMPONENT_KEYWORDS = {
    "header": ["header", "top", "navigation", "navbar", "menu", "logo"],
    "hero": ["hero", "banner", "main title", "heading", "welcome", "intro"],
    "button": ["button", "btn", "subscribe", "cta", "call to action", "click"],
    "video": ["video", "gallery", "content", "thumbnails", "playlist"],
    "footer": ["footer", "bottom", "contact", "links", "social"],
    "navigation": ["nav", "menu", "navigation", "navbar", "sidebar"],
    "content": ["text", "content", "description", "paragraph", "section"],
}

# Checked in order; first action with a matching keyword wins
ACTION_KEYWORDS = {
    "style_update": ["change color", "make bigger", "resize", "style", "background", "font"],
    "content_update": ["change text", "update content", "modify text", "edit text", "rename"],
    "structure_update": ["add element", "remove element", "restructure", "layout"],
    "add_component": ["add", "create", "insert", "new"],
    "remove_component": ["remove", "delete", "hide", "eliminate"],
}

FALLBACK_IDS = {
    "header": "main-header",
    "hero": "hero-section",
    "button": "cta-btn",
    "video": "video-gallery",
    "footer": "main-footer",
    "navigation": "main-nav",
    "content": "main-content",
}

NAMED_COLORS = {
    "blue": "#0066cc",
    "green": "#00cc66",
    "yellow": "#ffcc00",
    "purple": "#6600cc",
    "orange": "#ff6600",
}

MIN_KEYWORD_SCORE = 0.2
MIN_CONFIDENCE = 0.3

_COLOR_VALUE_RE = re.compile(r"(#[0-9a-f]{6}\b|#[0-9a-f]{3}\b|rgba?\([^)]+\))", re.IGNORECASE)
_COLOR_WORD_RE = re.compile(r"(?:color|background)\b(?:\s+(?:to|of|as|into))?[^a-z#]*([a-z]+)")
_QUOTED_TEXT_RE = re.compile(r"""(?:text|content)[^"']*["']([^"']+)["']""", re.IGNORECASE)
_DETAIL_RE = re.compile(r"color|size|text|style")
_SECTION_RE = re.compile(r"\b(entire|whole|all)\b")


@dataclass
class IntentUpdates:
    """Concrete changes to apply to the target element."""
    add_class: Optional[str] = None
    remove_class: Optional[str] = None
    style: Dict[str, str] = field(default_factory=dict)
    content: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v}


@dataclass
class ComponentIntent:
    target_component_id: str
    target_component_type: str
    file: str
    action: str
    updates: IntentUpdates
    preservation_level: str
    confidence: float
    selector: Optional[str] = None


@dataclass
class ParseResult:
    success: bool
    intent: Optional[ComponentIntent] = None
    error: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)


class IntentParser:
    """
    Keyword-driven parser for edit requests.

    Example:
        >>> parser = IntentParser()
        >>> result = parser.parse_user_request(
        ...     "make the subscribe button bigger", component_map, DesignTokens()
        ... )
        >>> result.intent.updates.add_class
        'btn-lg'
    """

    def parse_user_request(
        self,
        user_chat: str,
        component_map: Dict[str, ComponentMapEntry],
        design_tokens: Optional[DesignTokens] = None
    ) -> ParseResult:
        chat = (user_chat or "").lower().strip()

        if not chat:
            return ParseResult(
                success=False,
                error="Empty request",
                suggestions=[
                    "Try describing what you want to change, like "
                    "'make the button bigger' or 'change header color'"
                ],
            )

        target = self._identify_target_component(chat, component_map)
        if target is None:
            return ParseResult(
                success=False,
                error="Could not identify target component",
                suggestions=[
                    "Be more specific about which component to modify",
                    "Try mentioning: header, button, footer, video section, or navigation",
                ],
            )

        action = self._determine_action(chat)
        updates = self._extract_updates(chat, action, design_tokens)
        confidence = self._calculate_confidence(chat, target["id"], action)

        if confidence < MIN_CONFIDENCE:
            return ParseResult(
                success=False,
                error="Low confidence in parsing request",
                suggestions=[
                    "Be more specific about what you want to change",
                    "Example: 'Change the subscribe button to be larger and red'",
                ],
            )

        intent = ComponentIntent(
            target_component_id=target["id"],
            target_component_type=target["type"],
            file=target["file"],
            action=action,
            updates=updates,
            preservation_level=self._determine_preservation_level(chat),
            confidence=confidence,
            selector=target.get("selector"),
        )
        logger.debug(
            f"Parsed intent: target={intent.target_component_id}, action={action}, "
            f"confidence={confidence:.2f}"
        )
        return ParseResult(success=True, intent=intent)

    def _identify_target_component(
        self,
        chat: str,
        component_map: Dict[str, ComponentMapEntry]
    ) -> Optional[Dict[str, Any]]:
        # Explicit key or id mention
        for key, entry in component_map.items():
            if key.lower() in chat or (entry.id and entry.id.lower() in chat):
                return {
                    "id": entry.id or key,
                    "type": entry.type or "content",
                    "file": entry.file,
                    "selector": entry.selector,
                }

        best_match = None
        best_score = 0.0

        for component_type, keywords in COMPONENT_KEYWORDS.items():
            hits = [k for k in keywords if k in chat]
            score = len(hits) / len(keywords)

            if score > best_score and score > MIN_KEYWORD_SCORE:
                best_score = score
                component_id, selector = self._find_component_by_type(component_type, component_map)
                best_match = {
                    "id": component_id,
                    "type": component_type,
                    "file": "index.html",
                    "selector": selector,
                }

        return best_match

    def _find_component_by_type(
        self,
        component_type: str,
        component_map: Dict[str, ComponentMapEntry]
    ):
        for key, entry in component_map.items():
            if entry.type == component_type or component_type in key:
                return entry.id or key, entry.selector

        return FALLBACK_IDS.get(component_type, f"{component_type}-component"), None

    def _determine_action(self, chat: str) -> str:
        for action, keywords in ACTION_KEYWORDS.items():
            if any(k in chat for k in keywords):
                return action
        return "style_update"

    def _extract_updates(
        self,
        chat: str,
        action: str,
        design_tokens: Optional[DesignTokens]
    ) -> IntentUpdates:
        updates = IntentUpdates()

        if action == "style_update":
            color = self._find_color(chat, design_tokens)
            if color:
                updates.style["color"] = color

        if "bigger" in chat or "larger" in chat:
            updates.add_class = "btn-lg"
            updates.style["font-size"] = "1.2em"
        if "smaller" in chat:
            updates.add_class = "btn-sm"
            updates.style["font-size"] = "0.9em"

        if action == "content_update":
            text_match = _QUOTED_TEXT_RE.search(chat)
            if text_match:
                updates.content = text_match.group(1)

        if "highlight" in chat:
            updates.add_class = "highlighted"
        if "remove highlight" in chat:
            updates.remove_class = "highlighted"

        return updates

    def _find_color(self, chat: str, design_tokens: Optional[DesignTokens]) -> Optional[str]:
        value_match = _COLOR_VALUE_RE.search(chat)
        if value_match:
            return value_match.group(1)

        color_map = self._color_map(design_tokens)
        for word in re.findall(r"[a-z]+", chat):
            if word in color_map:
                return color_map[word]

        word_match = _COLOR_WORD_RE.search(chat)
        if word_match:
            return color_map.get(word_match.group(1), word_match.group(1))

        return None

    def _color_map(self, design_tokens: Optional[DesignTokens]) -> Dict[str, str]:
        primary = design_tokens.colors.get("primary") if design_tokens else None
        return {"red": primary or "#ff0000", **NAMED_COLORS}

    def _calculate_confidence(self, chat: str, target_id: str, action: str) -> float:
        confidence = 0.5

        if target_id and target_id.lower() in chat:
            confidence += 0.3

        if any(word in chat for word in ACTION_KEYWORDS.get(action, [])):
            confidence += 0.2

        if _DETAIL_RE.search(chat):
            confidence += 0.1

        return min(confidence, 1.0)

    def _determine_preservation_level(self, chat: str) -> str:
        if _SECTION_RE.search(chat):
            return "section"
        if "component" in chat or "element" in chat:
            return "component"
        return "minimal"

    def generate_targeted_prompt(
        self,
        intent: ComponentIntent,
        channel: Optional[Dict[str, Any]],
        current_code: str
    ) -> str:
        """Short prompt asking the model for the modified component only."""
        changes = "\n".join(
            f"- {key}: {json.dumps(value) if isinstance(value, dict) else value}"
            for key, value in intent.updates.to_dict().items()
        ) or "- (as described in the request)"

        if channel:
            channel_block = (
                f"- Channel: {channel.get('title', '')}\n"
                f"- Subscribers: {int(channel.get('subscriber_count') or 0):,}\n"
                f"- Videos: {int(channel.get('video_count') or 0):,}"
            )
        else:
            channel_block = "No channel data"

        return f"""# PRECISION COMPONENT EDITING

## COMPONENT TARGET
- ID: {intent.target_component_id}
- Type: {intent.target_component_type}
- File: {intent.file}
- Action: {intent.action}
- Confidence: {round(intent.confidence * 100)}%

## MODIFICATION SCOPE
CRITICAL: Edit ONLY the {intent.target_component_type} component with ID "{intent.target_component_id}"

## SPECIFIC CHANGES REQUESTED
{changes}

## PRESERVATION RULES
- Do NOT modify any other HTML elements
- Do NOT change overall page layout
- Do NOT alter existing color schemes (unless specifically requested)
- Do NOT remove YouTube integration or channel data
- ONLY modify the specified {intent.target_component_type} component

## CHANNEL DATA (preserve)
{channel_block}

## CURRENT CODE CONTEXT
```html
{(current_code or "")[:800]}...
```

## OUTPUT REQUIREMENT
Return ONLY the modified component code, preserving all existing functionality and design."""

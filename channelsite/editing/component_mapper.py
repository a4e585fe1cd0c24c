"""
Component Mapper - Locates named regions of a generated page.

The generated sites follow a small set of structure conventions
(<header>, <nav>, .hero-section, .video-gallery, .btn-primary, <footer>).
This module scans the HTML for those regions with regular expressions and
builds a component map that targeted edits refer to by key.

The regex scan is deliberately shallow: the first closing tag after the
opening tag ends the region, which is what the edit prompt shows the model.
"""
import json
import re
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

from channelsite.core.logging_config import get_logger

logger = get_logger(__name__)

# Component key -> candidate selectors, first match wins
COMMON_COMPONENTS = [
    ("header", ["header"]),
    ("navigation", ["nav"]),
    ("hero", [".hero-section", ".hero"]),
    ("videos", [".video-gallery", ".videos-section"]),
    ("footer", ["footer"]),
    ("cta-button", [".btn-primary", ".subscribe-btn"]),
]

# Checked in this order; the first component with a matching keyword wins
COMPONENT_KEYWORDS = [
    ("header", ["header", "top section", "title area", "logo area"]),
    ("hero", ["hero", "main banner", "hero section", "main title"]),
    ("cta-button", ["button", "subscribe button", "cta", "call to action"]),
    ("navigation", ["nav", "menu", "navigation", "navbar"]),
    ("videos", ["video", "gallery", "video section"]),
    ("footer", ["footer", "bottom section", "contact info"]),
]

_BUTTON_RE = re.compile(r"<button[^>]*>[\s\S]*?</button>", re.IGNORECASE)
_ID_ATTR_RE = re.compile(r"""id\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
_CLASS_ATTR_RE = re.compile(r"""class\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
_REQUEST_ID_RE = re.compile(r"""\bid\s*[=:]?\s*["']?([^"'\s]+)["']?""")
_REQUEST_CLASS_RE = re.compile(r"""\bclass\s*[=:]?\s*["']?([^"'\s]+)["']?""")
_STYLE_RE = re.compile(r"<style[^>]*>([\s\S]*?)</style>", re.IGNORECASE)

COMPONENT_NOT_FOUND = "Component not found"


@dataclass
class ComponentMapEntry:
    """Where a component lives and how to select it."""
    selector: str
    type: str
    file: str = "index.html"
    id: Optional[str] = None
    class_name: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {"file": self.file, "selector": self.selector, "type": self.type}
        if self.id:
            data["id"] = self.id
        if self.class_name:
            data["class"] = self.class_name
        return data


@dataclass
class DesignTokens:
    """Colors, typography, spacing and breakpoints of the current page."""
    colors: Dict[str, str] = field(default_factory=lambda: {
        "primary": "#ff0000",
        "secondary": "#666666",
        "background": "#ffffff",
        "text": "#333333",
        "accent": "#0066cc",
    })
    typography: Dict[str, object] = field(default_factory=lambda: {
        "font_family": "Arial, sans-serif",
        "heading_font": "Arial, sans-serif",
        "font_size": {
            "small": "14px",
            "medium": "16px",
            "large": "20px",
            "xlarge": "28px",
        },
    })
    spacing: Dict[str, str] = field(default_factory=lambda: {
        "small": "8px",
        "medium": "16px",
        "large": "24px",
        "xlarge": "48px",
    })
    breakpoints: Dict[str, str] = field(default_factory=lambda: {
        "mobile": "768px",
        "tablet": "1024px",
        "desktop": "1200px",
    })

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def selector_pattern(selector: str) -> re.Pattern:
    """Regex matching the region a selector refers to (#id, .class or tag)."""
    if selector.startswith("#"):
        ident = re.escape(selector[1:])
        return re.compile(
            rf"""<[^>]*id\s*=\s*["']{ident}["'][^>]*>[\s\S]*?</[^>]*>""",
            re.IGNORECASE
        )
    if selector.startswith("."):
        class_name = re.escape(selector[1:])
        return re.compile(
            rf"""<[^>]*class\s*=\s*["'][^"']*{class_name}[^"']*["'][^>]*>[\s\S]*?</[^>]*>""",
            re.IGNORECASE
        )
    tag = re.escape(selector)
    return re.compile(rf"<{tag}[^>]*>[\s\S]*?</{tag}>", re.IGNORECASE)


def _component_type(key: str) -> str:
    if "header" in key:
        return "header"
    if "hero" in key:
        return "hero"
    if "button" in key:
        return "button"
    if "video" in key:
        return "video"
    if "footer" in key:
        return "footer"
    if "nav" in key:
        return "navigation"
    return "content"


def extract_css(html: str) -> str:
    """Contents of the first <style> block, or "" when there is none."""
    match = _STYLE_RE.search(html or "")
    return match.group(1) if match else ""


class ComponentMapper:
    """
    Builds and queries the component map of one HTML document.

    Example:
        >>> mapper = ComponentMapper()
        >>> component_map = mapper.parse_html_structure(html)
        >>> mapper.identify_target_component("make the footer darker")
        'footer'
    """

    def __init__(self, design_tokens: Optional[DesignTokens] = None):
        self.design_tokens = design_tokens or DesignTokens()
        self.component_map: Dict[str, ComponentMapEntry] = {}

    def parse_html_structure(self, html: str) -> Dict[str, ComponentMapEntry]:
        """
        Scan HTML for the common components and every identifiable button.

        Buttons with an id become "button-<id>"; buttons with only a class
        become "button-<index>" where index counts all buttons on the page.
        """
        component_map: Dict[str, ComponentMapEntry] = {}

        for key, selectors in COMMON_COMPONENTS:
            for selector in selectors:
                if selector_pattern(selector).search(html):
                    component_map[key] = self._entry(key, selector)
                    break

        for index, button in enumerate(_BUTTON_RE.findall(html)):
            id_match = _ID_ATTR_RE.search(button)
            class_match = _CLASS_ATTR_RE.search(button)

            if id_match:
                button_id = id_match.group(1)
                component_map[f"button-{button_id}"] = ComponentMapEntry(
                    selector=f"#{button_id}",
                    type="button",
                    id=button_id,
                )
            elif class_match:
                classes = class_match.group(1)
                component_map[f"button-{index}"] = ComponentMapEntry(
                    selector=f".{classes.split()[0]}",
                    type="button",
                    class_name=classes,
                )

        self.component_map = component_map
        logger.debug(f"Parsed component map: {list(component_map)}")
        return component_map

    def _entry(self, key: str, selector: str) -> ComponentMapEntry:
        entry = ComponentMapEntry(selector=selector, type=_component_type(key))
        if selector.startswith("#"):
            entry.id = selector[1:]
        elif selector.startswith("."):
            entry.class_name = selector[1:]
        return entry

    def identify_target_component(self, user_request: str) -> Optional[str]:
        """
        Find the component key a request is about.

        Keyword tables are checked first, then explicit "id x" / "class x"
        mentions that exist in the current map.
        """
        request = user_request.lower()

        for component, keywords in COMPONENT_KEYWORDS:
            if any(keyword in request for keyword in keywords):
                return component

        for pattern in (_REQUEST_ID_RE, _REQUEST_CLASS_RE):
            match = pattern.search(request)
            if not match:
                continue
            name = match.group(1)
            for candidate in (name, f"button-{name}"):
                if candidate in self.component_map:
                    return candidate

        return None

    def get_component(self, component_key: str) -> Optional[ComponentMapEntry]:
        return self.component_map.get(component_key)

    def get_preservation_rules(self, component_key: str) -> List[str]:
        """Rules for an edit of one component; [] for unknown keys."""
        component = self.get_component(component_key)
        if not component:
            return []

        colors = json.dumps(self.design_tokens.colors)
        return [
            f"NEVER modify components other than {component_key}",
            "NEVER change overall page layout or structure",
            f"NEVER alter design tokens: {colors}",
            f"NEVER modify CSS classes unrelated to {component.selector}",
            "NEVER change responsive breakpoints",
            "NEVER remove YouTube integration or channel data",
            f"ONLY modify the {component.type} component with selector {component.selector}",
            "PRESERVE all existing styling and design consistency",
            "USE existing design tokens for any new styles",
        ]

    def extract_design_tokens(self, css: str) -> DesignTokens:
        """Read CSS custom properties, falling back to the default tokens."""
        defaults = DesignTokens()

        def value(name: str, default: str) -> str:
            match = re.search(rf"--{name}[^:]*:\s*([^;]+)", css or "")
            return match.group(1).strip() if match else default

        font_sizes = defaults.typography["font_size"]
        return DesignTokens(
            colors={k: value(k, v) for k, v in defaults.colors.items()},
            typography={
                "font_family": value("font-family", defaults.typography["font_family"]),
                "heading_font": value("heading-font", defaults.typography["heading_font"]),
                "font_size": {k: value(f"font-size-{k}", v) for k, v in font_sizes.items()},
            },
            spacing={k: value(f"spacing-{k}", v) for k, v in defaults.spacing.items()},
            breakpoints=dict(defaults.breakpoints),
        )

    def extract_component_code(self, html: str, entry: Optional[ComponentMapEntry]) -> str:
        """Markup of a component's region, or "Component not found"."""
        if entry is None or not entry.selector:
            return COMPONENT_NOT_FOUND

        match = selector_pattern(entry.selector).search(html or "")
        return match.group(0) if match else COMPONENT_NOT_FOUND

    def generate_targeted_instructions(
        self,
        user_request: str,
        component_key: str,
        current_code: str
    ) -> str:
        """Component-level instructions for one edit; "" for unknown keys."""
        component = self.get_component(component_key)
        if not component:
            return ""

        rules = "\n".join(self.get_preservation_rules(component_key))
        component_code = self.extract_component_code(current_code, component)

        return f"""# COMPONENT-LEVEL EDITING INSTRUCTIONS

## USER REQUEST
"{user_request}"

## TARGET COMPONENT
- Component: {component_key}
- Type: {component.type}
- Selector: {component.selector}
- File: {component.file}

## STRICT PRESERVATION RULES
{rules}

## DESIGN CONTEXT
- Primary Color: {self.design_tokens.colors["primary"]}
- Font Family: {self.design_tokens.typography["font_family"]}
- Spacing System: {json.dumps(self.design_tokens.spacing)}

## CURRENT COMPONENT CODE
```html
{component_code}
```

## MODIFICATION REQUIREMENTS
1. SCOPE: Modify ONLY the {component.type} component
2. PRESERVATION: Keep all other HTML, CSS, and JS exactly the same
3. CONSISTENCY: Use existing design tokens and patterns
4. STRUCTURE: Maintain current DOM structure and classes
5. FUNCTIONALITY: Preserve all existing JavaScript functionality

## OUTPUT FORMAT
Provide the complete modified HTML file with ONLY the requested component changed."""

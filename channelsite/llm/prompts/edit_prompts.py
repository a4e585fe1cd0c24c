"""
Edit Prompts - Targeted, component-level edit prompts.

A targeted edit asks the model to change ONE component and repeat the
rest of the page verbatim. The prompt carries the component map, the
design tokens and the preservation rules so the model knows what it
must not touch.
"""
import json
from typing import Optional, Dict, Any, List

# Current code is truncated to this many characters in the prompt context
CODE_CONTEXT_CHARS = 2000


def get_edit_system_prompt() -> str:
    """System prompt used for targeted edits."""
    return """You are a precise website editor. You receive a complete HTML document and a request to change ONE component.

RULES:
- Modify ONLY the component named in the request
- Keep every other element, style and script exactly as it is
- Reuse the existing CSS custom properties and classes
- Return the COMPLETE updated HTML document starting with <!DOCTYPE html>
- No explanations, no markdown fences"""


def _format_count(value: Any) -> str:
    try:
        return f"{int(value or 0):,}"
    except (TypeError, ValueError):
        return "0"


def get_targeted_change_prompt(
    user_request: str,
    project_id: str,
    target_component: str,
    change_scope: str,
    component_map: Dict[str, Dict[str, Any]],
    design_tokens: Dict[str, Any],
    preservation_rules: List[str],
    component_code: str,
    current_code: str,
    channel: Optional[Dict[str, Any]] = None
) -> str:
    """
    Build the component-level edit prompt.

    Args:
        user_request: The user's edit request
        project_id: Project being edited
        target_component: Component map key to modify
        change_scope: minimal, component or section
        component_map: Parsed component map (as dicts)
        design_tokens: Design tokens (as dict)
        preservation_rules: Rules the model must follow
        component_code: Current markup of the target component
        current_code: Full current document (truncated here)
        channel: ChannelInfo dict, if any

    Returns:
        The full prompt text
    """
    channel = channel or {}
    entry = component_map.get(target_component, {})

    code_context = current_code[:CODE_CONTEXT_CHARS]
    if len(current_code) > CODE_CONTEXT_CHARS:
        code_context += "..."

    rules = "\n".join(preservation_rules)
    subscribers = _format_count(channel.get("subscriber_count"))
    videos = _format_count(channel.get("video_count"))

    return f"""# COMPONENT-LEVEL WEBSITE EDITING

## CRITICAL: PRECISION TARGETING
This is a component-level edit. Modify ONLY the specific component requested.

## USER REQUEST ANALYSIS
- Request: "{user_request}"
- Target Component: {target_component}
- Change Scope: {change_scope}
- Component Type: {entry.get("type", "unknown")}
- Component Selector: {entry.get("selector", "unknown")}

## COMPONENT MAPPING
```json
{json.dumps(component_map, indent=2)}
```

## DESIGN TOKENS (MUST PRESERVE)
```json
{json.dumps(design_tokens, indent=2)}
```

## PRESERVATION RULES
{rules}

## CURRENT PROJECT CONTEXT
- Project ID: {project_id}
- Channel: {channel.get("title") or "Content Creator"}
- Subscribers: {subscribers}
- Videos: {videos}
- Channel Thumbnail: {channel.get("thumbnail", "")}

## CURRENT CODE STRUCTURE
```html
{code_context}
```

## TARGET COMPONENT
- Component: {target_component}
- File: {entry.get("file", "index.html")}
- Selector: {entry.get("selector", "unknown")}
- Current Code:
```html
{component_code}
```

## MODIFICATION REQUIREMENTS
1. SCOPE: Modify ONLY the {target_component} component
2. PRESERVATION: Keep ALL other components exactly as they are
3. DESIGN: Use existing design tokens and CSS classes
4. STRUCTURE: Maintain DOM structure and relationships
5. FUNCTIONALITY: Preserve all JavaScript and interactions
6. DATA: Use real YouTube channel data

## OUTPUT
Return the COMPLETE HTML document with only the {target_component} changed.
Make the SMALLEST possible change that satisfies the request."""

"""
Website Generation Prompts - Prompts for full-page generation.

This module contains prompts that instruct the LLM to:
1. Produce one complete HTML document (embedded CSS and JavaScript)
2. Use the real YouTube channel data it is given
3. Either enhance the current page or design a new one

Channel data is passed as indented JSON so the model sees real titles,
counts and video ids instead of placeholders.
"""
import json
from typing import Optional, Dict, Any


def get_generation_system_prompt(preserve_design: bool = True) -> str:
    """
    Get the system prompt for website generation.

    Args:
        preserve_design: Keep the existing look and only enhance it

    Returns:
        Complete system prompt for the LLM
    """
    design_rule = (
        "Preserve existing design elements while enhancing them"
        if preserve_design
        else "Create a completely new modern design"
    )

    return f"""You are an expert web developer and UI/UX designer. Generate a complete, modern, professional HTML website with embedded CSS and JavaScript.

## REQUIREMENTS
- Create a responsive website with modern design (gradients, flexbox, grid, animations)
- Mobile-first responsive design
- Professional color scheme and typography, using CSS custom properties
  (--primary, --secondary, --background, --text, --accent)
- Modern UI components: navigation, hero section, video gallery, stats cards, footer
- {design_rule}
- Use the REAL data from the channel information provided
- Include working YouTube embeds (https://www.youtube.com/embed/<video id>)
- Add a subscribe button linking to the channel

## STRUCTURE CONVENTIONS
- <header> containing a <nav>
- a section with class "hero-section"
- a section with class "video-gallery"
- primary call-to-action buttons use class "btn-primary"
- <footer> at the end of the body

## OUTPUT
Return ONLY the complete HTML document starting with <!DOCTYPE html>. No explanations, no markdown."""


def get_generation_user_prompt(
    user_request: str,
    channel: Optional[Dict[str, Any]] = None,
    current_code: Optional[str] = None
) -> str:
    """
    Get the user prompt for website generation.

    Args:
        user_request: What the user asked for
        channel: ChannelInfo dict, if the project has one
        current_code: Current HTML document to enhance

    Returns:
        Formatted user prompt
    """
    parts = [f"User Request: {user_request}"]

    if channel:
        parts.append(f"Channel Data: {json.dumps(channel, indent=2, default=str)}")

    if current_code:
        parts.append(f"Current Code to enhance:\n{current_code}")
    else:
        parts.append("Create a new modern website")

    closing = "Generate a complete, professional website that incorporates the user's request"
    if channel:
        closing += " while using the provided channel data"
    parts.append(closing + ".")

    return "\n\n".join(parts)

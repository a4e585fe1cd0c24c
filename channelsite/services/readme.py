"""
README generation for synced repositories.

The README describes the generated site: channel stats, detected
features, design principles, the components found on the page and where
it is deployed.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from channelsite.editing.component_mapper import ComponentMapper, extract_css

BASE_FEATURES = [
    "Responsive design for all devices",
    "Modern CSS3 animations and transitions",
    "YouTube channel integration",
    "Real-time data display",
    "SEO-optimized structure",
    "Fast loading performance",
]

DESIGN_PRINCIPLES = [
    "Mobile-first responsive layout",
    "Consistent design tokens (colors, typography, spacing)",
    "Accessible, semantic HTML",
    "Real channel data instead of placeholders",
]


def _count(value: Any) -> str:
    try:
        return f"{int(value or 0):,}"
    except (TypeError, ValueError):
        return "0"


def generate_project_features(
    channel: Optional[Dict[str, Any]],
    code: Optional[str]
) -> List[str]:
    """Feature list from channel data and the layout techniques in the code."""
    features = list(BASE_FEATURES)

    if channel:
        features.extend([
            f"Integration with {channel.get('title', 'the channel')}",
            "Live subscriber count display",
            "Latest videos showcase",
        ])

    code = code or ""
    if "grid" in code:
        features.append("CSS Grid layout system")
    if "flex" in code:
        features.append("Flexbox-based components")
    if "@media" in code:
        features.append("Mobile-first responsive design")

    return features


def generate_readme(
    title: str,
    description: Optional[str],
    channel: Optional[Dict[str, Any]],
    code: Optional[str],
    github_url: Optional[str] = None,
    netlify_url: Optional[str] = None,
    last_modified: Optional[datetime] = None
) -> str:
    """Markdown README for a project repository."""
    features = "\n".join(f"- {f}" for f in generate_project_features(channel, code))
    principles = "\n".join(f"- {p}" for p in DESIGN_PRINCIPLES)

    if channel:
        channel_block = "\n".join([
            f"- **Channel**: {channel.get('title', '')}",
            f"- **Subscribers**: {_count(channel.get('subscriber_count'))}",
            f"- **Videos**: {_count(channel.get('video_count'))}",
            f"- **Views**: {_count(channel.get('view_count'))}",
        ])
    else:
        channel_block = "No channel data available"

    mapper = ComponentMapper()
    components = list(mapper.parse_html_structure(code or ""))
    colors = mapper.extract_design_tokens(extract_css(code or "")).colors

    deployment = "\n".join(
        line for line in (
            f"- **Live Site**: [{netlify_url}]({netlify_url})" if netlify_url else "",
            f"- **Source Code**: [{github_url}]({github_url})" if github_url else "",
        ) if line
    ) or "Not deployed yet"

    modified = (last_modified or datetime.utcnow()).isoformat()

    return f"""# {title}

{description or f"AI-generated website for {title}"}

## YouTube Channel Integration

{channel_block}

## Features

{features}

## Design Principles

{principles}

## Architecture

- **Components**: {", ".join(components) or "Modern web components"}
- **Colors**: {", ".join(colors.values())}

## Deployment

{deployment}

## AI-Generated

This website was generated using AI with real-time YouTube data integration.

**Last Modified**: {modified}
"""

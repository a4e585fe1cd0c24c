"""
Chat Prompts - Assistant persona for the builder chat.

The chat assistant talks about the site; it never returns code. Code
changes go through the generation endpoint.
"""
from typing import Optional, Dict, Any


FEATURE_KEYWORDS = [
    ("video", ("video", "youtube")),
    ("branding", ("brand", "color", "style")),
    ("audience", ("subscribe", "audience")),
    ("mobile", ("mobile", "phone")),
]


def get_chat_system_prompt(channel: Optional[Dict[str, Any]] = None) -> str:
    """
    Get the system prompt for the website assistant.

    Args:
        channel: ChannelInfo dict, if the project has one

    Returns:
        System prompt naming the channel and its stats when known
    """
    channel_name = (channel or {}).get("title") or "YouTube channel"

    stats = ""
    if channel:
        subscribers = channel.get("subscriber_count", 0)
        videos = channel.get("video_count", 0)
        stats = f"Channel info: {subscribers} subscribers, {videos} videos.\n"

    return f"""You are a helpful AI assistant specialized in creating YouTube channel websites.
You're helping create a website for {channel_name}.
{stats}
Respond enthusiastically about YouTube features like video integration, channel branding,
subscribe widgets, SEO optimization, and mobile design.
Always mention the channel name when relevant and be specific about YouTube creator features.
Keep responses concise but exciting, focusing on actionable website improvements."""


def detect_feature(message: str) -> str:
    """
    Classify a chat message into a feature category.

    Returns:
        "video", "branding", "audience", "mobile" or "" (first match wins)
    """
    lower = message.lower()
    for feature, keywords in FEATURE_KEYWORDS:
        if any(k in lower for k in keywords):
            return feature
    return ""

"""
Prompts module - LLM prompt templates.

Prompts are stored as separate Python files for:
- Version control of prompt changes
- Clear documentation of prompt purpose
"""
from channelsite.llm.prompts.website_prompts import (
    get_generation_system_prompt,
    get_generation_user_prompt,
)
from channelsite.llm.prompts.chat_prompts import (
    get_chat_system_prompt,
    detect_feature,
)
from channelsite.llm.prompts.edit_prompts import (
    get_edit_system_prompt,
    get_targeted_change_prompt,
)

__all__ = [
    "get_generation_system_prompt",
    "get_generation_user_prompt",
    "get_chat_system_prompt",
    "detect_feature",
    "get_edit_system_prompt",
    "get_targeted_change_prompt",
]

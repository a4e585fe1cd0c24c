"""
Generation Service - Full website generation and targeted edits.

This service orchestrates one generation request:
1. Loads the project (channel data and current code default to it)
2. Chooses a targeted edit when the page has a matching component,
   otherwise a full generation prompt
3. Calls the provider fallback chain; on total failure renders the
   static fallback site
4. Extracts the HTML document from the reply and validates targeted edits
5. Persists the code and appends both messages to the project chat
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from channelsite.core.exceptions import LLMError, TargetNotFoundError
from channelsite.core.logging_config import get_logger
from channelsite.editing.editor import HTMLEditor, extract_html_document
from channelsite.editing.fallback_template import generate_fallback_site
from channelsite.editing.targeting import TargetedChange, build_targeted_change
from channelsite.llm.client import LLMClient, get_llm_client
from channelsite.llm.prompts import (
    get_edit_system_prompt,
    get_generation_system_prompt,
    get_generation_user_prompt,
)
from channelsite.memory import get_memory_manager
from channelsite.services.project_service import ProjectService, get_project_service

logger = get_logger(__name__)

FALLBACK_PROVIDER = "fallback"

CODE_QUALITY = {
    "groq": "high",
    "openrouter": "good",
    "together": "good",
}

PROVIDER_LABELS = {
    "groq": "Groq",
    "openrouter": "OpenRouter",
    "together": "Together",
}


@dataclass
class GenerationResult:
    code: str
    reply: str
    provider: str
    code_quality: str
    targeted: bool = False
    target_component: Optional[str] = None
    change_scope: Optional[str] = None
    valid: bool = True


def code_quality_for(provider: str) -> str:
    return CODE_QUALITY.get(provider, "standard")


class GenerationService:
    """
    Service for generating and editing project websites.

    Example:
        >>> service = GenerationService()
        >>> result = service.generate(project_id, user_id, "Make the footer dark blue")
        >>> result.targeted, result.target_component
        (True, 'footer')
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        project_service: Optional[ProjectService] = None,
        memory_manager=None
    ):
        self.llm_client = llm_client or get_llm_client()
        self.project_service = project_service or get_project_service()
        self.memory_manager = memory_manager or get_memory_manager()
        self.editor = HTMLEditor()
        logger.info("GenerationService initialized")

    def preview_targeted_change(self, project_id: str, user_id: str, user_request: str) -> TargetedChange:
        """
        Build the targeted-edit prompt without calling a provider.

        Raises:
            TargetNotFoundError: If the project has no code or no component matches
        """
        project = self.project_service.get_project(project_id, user_id)
        if not project.source_code:
            raise TargetNotFoundError(user_request)

        return build_targeted_change(
            user_request=user_request,
            project_id=project_id,
            channel=project.channel_data,
            current_code=project.source_code,
        )

    def generate(
        self,
        project_id: str,
        user_id: str,
        user_request: str,
        channel: Optional[Dict[str, Any]] = None,
        current_code: Optional[str] = None,
        preserve_design: bool = True
    ) -> GenerationResult:
        project = self.project_service.get_project(project_id, user_id)
        channel = channel if channel is not None else project.channel_data
        current_code = current_code if current_code is not None else project.source_code

        logger.info(
            f"Generating: project={project_id}, request_length={len(user_request)}, "
            f"has_code={bool(current_code)}"
        )

        targeted_change = None
        if current_code:
            try:
                targeted_change = build_targeted_change(
                    user_request=user_request,
                    project_id=project_id,
                    channel=channel,
                    current_code=current_code,
                )
            except TargetNotFoundError:
                logger.info("No target component identified, using full generation")

        if targeted_change:
            system_prompt = get_edit_system_prompt()
            user_prompt = targeted_change.prompt
        else:
            system_prompt = get_generation_system_prompt(preserve_design)
            user_prompt = get_generation_user_prompt(user_request, channel, current_code)

        try:
            llm_result = self.llm_client.generate(
                user_message=user_prompt,
                system_prompt=system_prompt,
            )
            provider = llm_result.provider
            code = extract_html_document(llm_result.content)
            reply = self._reply_for(provider, targeted_change)
        except LLMError as e:
            logger.error(f"All providers failed, using fallback template: {e.message}")
            fallback = generate_fallback_site(user_request, channel)
            provider = FALLBACK_PROVIDER
            code = fallback.code
            reply = fallback.response
            # The template replaces the whole page
            targeted_change = None

        valid = True
        if targeted_change and current_code:
            valid = self.editor.validate_edit(current_code, code)
            if not valid:
                reply = (
                    f"The edit to the {targeted_change.target_component} changed more of the "
                    "page than expected, so it was not saved. Try a more specific request."
                )

        if valid:
            self.project_service.save_source_code(project_id, user_id, code)

        result = GenerationResult(
            code=code,
            reply=reply,
            provider=provider,
            code_quality=code_quality_for(provider),
            targeted=targeted_change is not None,
            target_component=targeted_change.target_component if targeted_change else None,
            change_scope=targeted_change.change_scope if targeted_change else None,
            valid=valid,
        )

        self._record_messages(project_id, user_id, user_request, result)

        logger.info(
            f"Generation complete: project={project_id}, provider={provider}, "
            f"targeted={result.targeted}, valid={valid}, code_length={len(code)}"
        )
        return result

    def _reply_for(self, provider: str, targeted_change: Optional[TargetedChange]) -> str:
        label = PROVIDER_LABELS.get(provider, provider)
        if targeted_change:
            return (
                f"Updated the {targeted_change.target_component} "
                f"({targeted_change.change_scope} change) with {label}."
            )
        return f"Website generated successfully with {label}."

    def _record_messages(
        self,
        project_id: str,
        user_id: str,
        user_request: str,
        result: GenerationResult
    ) -> None:
        memory = self.memory_manager.get_or_create(project_id, user_id)
        memory.add_user_message(user_request)
        memory.add_assistant_message(result.reply, metadata={
            "provider": result.provider,
            "target_component": result.target_component,
            "change_scope": result.change_scope,
            "valid": result.valid,
        })


_generation_service: Optional[GenerationService] = None


def get_generation_service() -> GenerationService:
    """Get or create the generation service singleton."""
    global _generation_service
    if _generation_service is None:
        _generation_service = GenerationService()
    return _generation_service


def reset_generation_service() -> None:
    """Reset the generation service (for testing)."""
    global _generation_service
    _generation_service = None

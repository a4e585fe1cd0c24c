"""
Provider Routes - Which LLM providers are configured (UI status lights).
"""
from fastapi import APIRouter

from channelsite.llm.client import get_llm_client
from channelsite.models.common import ProviderStatus, ProvidersStatusResponse

router = APIRouter(
    prefix="/providers",
    tags=["Providers"],
)


@router.get("/status", response_model=ProvidersStatusResponse, summary="LLM provider status")
def providers_status() -> ProvidersStatusResponse:
    client = get_llm_client()
    available = client.available_providers()
    return ProvidersStatusResponse(
        providers=[
            ProviderStatus(name=name, configured=name in available)
            for name in client.provider_order
        ],
        available=available,
    )

"""
YouTube Routes - Channel lookup for the builder UI.
"""
from fastapi import APIRouter, Depends

from channelsite.api.dependencies import CurrentUser, get_current_user
from channelsite.core.exceptions import ValidationError
from channelsite.core.logging_config import get_logger
from channelsite.core.validators import validate_youtube_url
from channelsite.integrations.youtube import YouTubeClient, extract_channel_identifier
from channelsite.models.channel import ChannelModel, ChannelRequest, ChannelResponse
from channelsite.models.common import ErrorResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/youtube",
    tags=["YouTube"],
    responses={
        404: {"model": ErrorResponse, "description": "Channel not found"},
        502: {"model": ErrorResponse, "description": "YouTube API error"},
    }
)


@router.post(
    "/channel",
    response_model=ChannelResponse,
    summary="Fetch a YouTube channel",
    description="""
    Accepts a channel URL (/channel/UC..., /c/name, /user/name, /@handle,
    /name) or a bare identifier, and returns the channel with its latest
    videos.
    """
)
def fetch_channel(
    request: ChannelRequest,
    user: CurrentUser = Depends(get_current_user)
) -> ChannelResponse:
    if request.url:
        is_valid, error = validate_youtube_url(request.url)
        if not is_valid:
            raise ValidationError(error, field="url")
        identifier = extract_channel_identifier(request.url)
        if not identifier:
            raise ValidationError("Could not find a channel in this URL", field="url")
    else:
        identifier = request.identifier.strip()

    logger.info(f"Channel lookup: identifier={identifier}, user={user.id[:8]}")

    channel = YouTubeClient().fetch_channel(
        identifier,
        fetch_videos=request.fetch_videos,
        max_results=request.max_results,
    )
    return ChannelResponse(channel=ChannelModel(**channel.to_dict()))

import asyncio
import aiohttp
from datetime import date
from typing import Optional
from pydantic import BaseModel, ValidationError, field_validator

from config import settings
from domain.exceptions import UpstreamError
from domain.models.song import SongDetails, DEFAULT_RELEASE_DATE, NO_INFORMATION
from utils.dates import parse_release_date
from utils.logger import get_logger

logger = get_logger(__name__)

class SongInfo(BaseModel):
    """
    Response body of the metadata service: GET {base}/info?group=&song=
    """
    release_date: Optional[date] = None
    text: Optional[str] = None
    link: Optional[str] = None

    @field_validator("release_date", mode="before")
    @classmethod
    def parse_date(cls, value):
        return parse_release_date(value)

    def to_details(self) -> SongDetails:
        """Missing or empty values fall back to the column defaults."""
        return SongDetails(
            release_date=self.release_date or DEFAULT_RELEASE_DATE,
            text=self.text or NO_INFORMATION,
            link=self.link or NO_INFORMATION,
        )

class MetadataClient:
    """
    Client for the external song metadata service.
    No retries and no fallback: any failure is an UpstreamError.
    """

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    async def fetch_details(self, group: str, song: str) -> SongInfo:
        url = f"{self.base_url}/info"
        params = {"group": group, "song": song}

        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(url, params=params) as response:
                    if response.status != 200:
                        logger.warning(f"Metadata API returned {response.status} for {group} - {song}")
                        raise UpstreamError(f"External API returned status {response.status}")

                    try:
                        # text/plain で返すサービスもあるので content_type は見ない
                        data = await response.json(content_type=None)
                        return SongInfo.model_validate(data)
                    except (ValueError, ValidationError) as e:
                        logger.warning(f"Metadata API response for {group} - {song} is not decodable: {e}")
                        raise UpstreamError(f"Error parsing external API response: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error fetching from metadata API ({url}): {e}")
            raise UpstreamError(f"Error making request to external API: {e}") from e

def get_metadata_client() -> MetadataClient:
    return MetadataClient(settings.EXTERNAL_API_URL)

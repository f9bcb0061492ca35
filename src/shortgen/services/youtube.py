"""YouTube Data API v3 publisher."""

import logging
from typing import Any, Optional

from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import Error as ApiClientError
from googleapiclient.http import MediaFileUpload

from ..config import config
from ..models import OutputBundle, PublishResult
from .base import Publisher

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES = [
    "https://www.googleapis.com/auth/youtube.upload",
    "https://www.googleapis.com/auth/youtube",
]


class YouTubePublisher(Publisher):
    """Uploads a bundle's video and thumbnail with a stored refresh token.

    Access tokens are minted from the refresh token on demand; the refresh
    token itself comes from the one-off ``authorize`` flow.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        refresh_token: Optional[str] = None,
        category_id: Optional[str] = None,
        privacy_status: Optional[str] = None,
        service: Optional[Any] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            client_id: OAuth2 client ID. Defaults to YT_CLIENT_ID env var.
            client_secret: OAuth2 client secret. Defaults to YT_CLIENT_SECRET env var.
            refresh_token: Refresh token. Defaults to YT_REFRESH_TOKEN env var.
            category_id: YouTube category ID.
            privacy_status: public, unlisted or private.
            service: Prebuilt YouTube API resource (mainly for tests).
            log: Logger for this run.
        """
        self._client_id = client_id or config.youtube_client_id
        self._client_secret = client_secret or config.youtube_client_secret
        self._refresh_token = refresh_token or config.youtube_refresh_token
        self._category_id = category_id or config.youtube_category_id
        self._privacy_status = privacy_status or config.youtube_privacy_status
        self._service = service
        self._log = log or logger

        if service is None:
            missing = [
                name
                for name, value in (
                    ("YT_CLIENT_ID", self._client_id),
                    ("YT_CLIENT_SECRET", self._client_secret),
                    ("YT_REFRESH_TOKEN", self._refresh_token),
                )
                if not value
            ]
            if missing:
                raise ValueError(f"Missing YouTube credentials: {', '.join(missing)}")

    def _get_service(self) -> Any:
        if self._service is None:
            credentials = Credentials(
                token=None,
                refresh_token=self._refresh_token,
                token_uri=TOKEN_URI,
                client_id=self._client_id,
                client_secret=self._client_secret,
                scopes=SCOPES,
            )
            self._service = build("youtube", "v3", credentials=credentials, cache_discovery=False)
        return self._service

    def _request_body(self, bundle: OutputBundle) -> dict:
        return {
            "snippet": {
                "title": bundle.title,
                "description": bundle.description,
                "tags": bundle.tags,
                "categoryId": self._category_id,
            },
            "status": {
                "privacyStatus": self._privacy_status,
                "selfDeclaredMadeForKids": False,
            },
        }

    def publish(self, bundle: OutputBundle) -> PublishResult:
        """Upload the video, then set its thumbnail.

        A failed thumbnail call does not undo the upload: the result stays
        successful with ``thumbnail_set`` False and the error recorded.
        """
        if not bundle.video.exists():
            message = f"Video file not found: {bundle.video}"
            self._log.error(message)
            return PublishResult(success=False, error_message=message)

        self._log.info("Uploading to YouTube...")
        try:
            youtube = self._get_service()
            request = youtube.videos().insert(
                part="snippet,status",
                body=self._request_body(bundle),
                media_body=MediaFileUpload(
                    str(bundle.video), mimetype="video/mp4", chunksize=-1, resumable=True
                ),
            )
            response = None
            while response is None:
                status, response = request.next_chunk()
                if status:
                    self._log.debug(f"Upload progress: {int(status.progress() * 100)}%")
            video_id = response["id"]

        except (ApiClientError, GoogleAuthError, OSError, KeyError) as e:
            self._log.error(f"Error uploading to YouTube: {e}")
            return PublishResult(success=False, error_message=str(e))

        result = PublishResult(
            success=True,
            video_id=video_id,
            video_url=f"https://www.youtube.com/watch?v={video_id}",
            short_url=f"https://www.youtube.com/shorts/{video_id}",
        )
        self._log.info(f"Video uploaded successfully. Video ID: {video_id}")

        if bundle.thumbnail.exists():
            try:
                youtube.thumbnails().set(
                    videoId=video_id,
                    media_body=MediaFileUpload(str(bundle.thumbnail), mimetype="image/jpeg"),
                ).execute()
                result.thumbnail_set = True
                self._log.info("Thumbnail uploaded successfully")
            except (ApiClientError, GoogleAuthError, OSError) as e:
                self._log.warning(f"Error setting thumbnail for {video_id}: {e}")
                result.error_message = f"Thumbnail upload failed: {e}"

        return result


def authorize(client_id: str, client_secret: str, port: int = 0) -> Optional[str]:
    """Run the installed-app OAuth flow and return a refresh token.

    Opens a browser for consent and listens on localhost for the redirect.
    Returns None if Google does not issue a refresh token, which happens when
    the app was already authorized without ``prompt=consent``.
    """
    from google_auth_oauthlib.flow import InstalledAppFlow

    flow = InstalledAppFlow.from_client_config(
        {
            "installed": {
                "client_id": client_id,
                "client_secret": client_secret,
                "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                "token_uri": TOKEN_URI,
                "redirect_uris": ["http://localhost"],
            }
        },
        SCOPES,
    )
    credentials = flow.run_local_server(port=port, access_type="offline", prompt="consent")
    return credentials.refresh_token

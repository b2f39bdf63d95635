"""WhatsApp Cloud API client.

Sends message payloads to the Graph API ``/messages`` endpoint and
manages uploaded media. Every request goes through the request
executor, so each attempt is timeout-bounded and retried according to
the client's (or the call's) retry settings.
"""

import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import httpx

from ..core.settings import ClientSettings, DEFAULT_API_VERSION, GRAPH_API_URL, parse_api_version
from ..errors import TransportError
from . import payloads
from .executor import execute
from .retry import RetryCondition, timeout_retry_condition

logger = logging.getLogger(__name__)


class WhatsappClient:
    """Async client for the WhatsApp Cloud API.

    Features:
    - Per-attempt request timeout
    - Conditional retry with a fixed delay between attempts
    - Per-call override of every resilience setting

    Example:
        async with WhatsappClient(access_token="...", phone_number_id="123") as client:
            response = await client.send_text("15550001111", "Hello!")
            print(response.json()["messages"][0]["id"])

            # Retry any failure up to 3 times for this call only
            await client.send_text(
                "15550001111", "Again",
                retries=3, retry_condition=lambda error, left: True,
            )
    """

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        version: Union[str, int] = DEFAULT_API_VERSION,
        request_timeout_ms: int = 3000,
        request_retries: int = 0,
        request_retry_condition: Optional[RetryCondition] = None,
        request_retry_delay_ms: int = 0,
        base_url: str = GRAPH_API_URL,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize client.

        Args:
            access_token: Graph API bearer token.
            phone_number_id: Sending phone number ID.
            version: Graph API version (``"v17.0"``, ``"17"`` or ``17``).
            request_timeout_ms: Default per-attempt timeout.
            request_retries: Default number of retries after the first attempt.
            request_retry_condition: Default retry predicate (timeouts only if None).
            request_retry_delay_ms: Default delay between attempts.
            base_url: Graph API root URL.
            http_client: Optional shared ``httpx.AsyncClient``; one is created
                (and closed by :meth:`aclose`) when omitted.

        Raises:
            ConfigurationError: If ``version`` is malformed.
        """
        self.phone_number_id = phone_number_id
        self.version = parse_api_version(version)
        self.request_timeout_ms = request_timeout_ms
        self.request_retries = request_retries
        self.request_retry_condition = request_retry_condition or timeout_retry_condition
        self.request_retry_delay_ms = request_retry_delay_ms

        root = base_url.rstrip("/")
        self.urls = {
            "messages": f"{root}/{self.version}/{phone_number_id}/messages",
            "media_upload": f"{root}/{self.version}/{phone_number_id}/media",
            "media": f"{root}/{self.version}",
        }
        self._auth_headers = {"Authorization": f"Bearer {access_token}"}

        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=None)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        request_retry_condition: Optional[RetryCondition] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "WhatsappClient":
        """Build a client from :class:`ClientSettings`."""
        return cls(
            access_token=settings.access_token,
            phone_number_id=settings.phone_number_id,
            version=settings.api_version,
            request_timeout_ms=settings.request_timeout_ms,
            request_retries=settings.request_retries,
            request_retry_condition=request_retry_condition,
            request_retry_delay_ms=settings.request_retry_delay_ms,
            base_url=settings.base_url,
            http_client=http_client,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "WhatsappClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _attempt(self, method: str, url: str, **kwargs: Any) -> Callable[[], Awaitable[httpx.Response]]:
        """Build a single-attempt coroutine function for one request."""
        headers = {**self._auth_headers, **kwargs.pop("headers", {})}

        async def attempt() -> httpx.Response:
            try:
                response = await self._http.request(method, url, headers=headers, **kwargs)
            except httpx.TimeoutException:
                raise
            except httpx.TransportError as e:
                raise TransportError(f"{method} {url} failed: {e}") from e

            if not response.is_success:
                raise TransportError(
                    f"{method} {url} returned status {response.status_code}",
                    status_code=response.status_code,
                    response=response,
                )
            return response

        return attempt

    async def _request(
        self,
        method: str,
        url: str,
        timeout_ms: Optional[int] = None,
        retries: Optional[int] = None,
        retry_condition: Optional[RetryCondition] = None,
        retry_delay_ms: Optional[int] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        return await execute(
            self._attempt(method, url, **kwargs),
            timeout_ms=self.request_timeout_ms if timeout_ms is None else timeout_ms,
            retries=self.request_retries if retries is None else retries,
            condition=retry_condition or self.request_retry_condition,
            delay_ms=self.request_retry_delay_ms if retry_delay_ms is None else retry_delay_ms,
        )

    async def send_payload(self, payload: Dict[str, Any], **request_options: Any) -> httpx.Response:
        """POST a prepared payload to the ``/messages`` endpoint.

        Args:
            payload: JSON-serializable message body.
            **request_options: Optional ``timeout_ms``, ``retries``,
                ``retry_condition`` and ``retry_delay_ms`` overrides.

        Returns:
            The successful (2xx) response.

        Raises:
            RequestTimeoutError: Last attempt timed out.
            TransportError: Last attempt failed with a non-2xx status or a
                network error.
        """
        try:
            response = await self._request("POST", self.urls["messages"], json=payload, **request_options)
        except Exception as e:
            logger.error(f"Sending {payload.get('type', 'status')} message failed: {e}")
            raise

        logger.debug(f"Sent {payload.get('type', 'status')} message ({response.status_code})")
        return response

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def send_text(
        self,
        to: str,
        text: str,
        preview_url: bool = False,
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.text_payload(to, text, preview_url, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def reply_to_message(
        self,
        to: str,
        text: str,
        message_id: str,
        preview_url: bool = False,
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.reply_payload(to, text, message_id, preview_url, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def send_reaction(
        self,
        to: str,
        emoji: str,
        message_id: str,
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.reaction_payload(to, emoji, message_id, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def send_location(
        self,
        to: str,
        latitude: str,
        longitude: str,
        name: str,
        address: str,
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.location_payload(to, latitude, longitude, name, address, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def send_sticker(
        self,
        to: str,
        sticker: str,
        link: bool = True,
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.sticker_payload(to, sticker, link, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def send_image(
        self,
        to: str,
        image: str,
        caption: Optional[str] = None,
        link: bool = True,
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.image_payload(to, image, caption, link, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def send_audio(
        self,
        to: str,
        audio: str,
        link: bool = True,
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.audio_payload(to, audio, link, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def send_video(
        self,
        to: str,
        video: str,
        caption: Optional[str] = None,
        link: bool = True,
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.video_payload(to, video, caption, link, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def send_document(
        self,
        to: str,
        document: str,
        filename: Optional[str] = None,
        caption: Optional[str] = None,
        link: bool = True,
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.document_payload(to, document, filename, caption, link, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def send_contacts(
        self,
        to: str,
        contacts: List[Dict[str, Any]],
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.contacts_payload(to, contacts, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def send_template(
        self,
        to: str,
        name: str,
        language_code: str,
        components: Optional[List[Dict[str, Any]]] = None,
        recipient_type: str = "individual",
        **request_options: Any,
    ) -> httpx.Response:
        payload = payloads.template_payload(to, name, language_code, components, recipient_type)
        return await self.send_payload(payload, **request_options)

    async def mark_as_read(self, message_id: str, **request_options: Any) -> httpx.Response:
        return await self.send_payload(payloads.mark_read_payload(message_id), **request_options)

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    async def upload_media(self, path: Union[str, Path], **request_options: Any) -> httpx.Response:
        """Upload a local file and return the response carrying the media ID.

        Raises:
            FileNotFoundError: If ``path`` is not an existing file.
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(
                f'Invalid file path: "{file_path}". The file does not exist at the specified path.'
            )

        content = await asyncio.to_thread(file_path.read_bytes)
        mime_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"

        return await self._request(
            "POST",
            self.urls["media_upload"],
            files={"file": (file_path.name, content, mime_type)},
            data={"type": mime_type, "messaging_product": payloads.MESSAGING_PRODUCT},
            **request_options,
        )

    async def get_media_url(self, media_id: str, **request_options: Any) -> httpx.Response:
        """Look up the (short-lived) download URL of an uploaded or received media."""
        return await self._request("GET", f"{self.urls['media']}/{media_id}", **request_options)

    async def download_media(self, media_url: str, **request_options: Any) -> httpx.Response:
        """Download media from a URL returned by :meth:`get_media_url`."""
        return await self._request("GET", media_url, **request_options)

    async def delete_media(self, media_id: str, **request_options: Any) -> httpx.Response:
        return await self._request("DELETE", f"{self.urls['media']}/{media_id}", **request_options)

"""Request bodies for the Cloud API ``/messages`` endpoint.

Each builder returns a plain dict ready to be JSON-encoded.
"""

from typing import Any, Dict, List, Optional

MESSAGING_PRODUCT = "whatsapp"


def _media_object(value: str, link: bool, **extra: Optional[str]) -> Dict[str, Any]:
    media = {"link": value} if link else {"id": value}
    media.update({k: v for k, v in extra.items() if v is not None})
    return media


def _message(to: str, message_type: str, recipient_type: str, **body: Any) -> Dict[str, Any]:
    return {
        "messaging_product": MESSAGING_PRODUCT,
        "recipient_type": recipient_type,
        "to": to,
        "type": message_type,
        **body,
    }


def text_payload(
    to: str,
    text: str,
    preview_url: bool = False,
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    return _message(to, "text", recipient_type, text={"preview_url": preview_url, "body": text})


def reply_payload(
    to: str,
    text: str,
    message_id: str,
    preview_url: bool = False,
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    """Text message quoting ``message_id``."""
    payload = text_payload(to, text, preview_url, recipient_type)
    payload["context"] = {"message_id": message_id}
    return payload


def reaction_payload(
    to: str,
    emoji: str,
    message_id: str,
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    return _message(to, "reaction", recipient_type, reaction={"message_id": message_id, "emoji": emoji})


def location_payload(
    to: str,
    latitude: str,
    longitude: str,
    name: str,
    address: str,
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    return _message(
        to,
        "location",
        recipient_type,
        location={
            "latitude": latitude,
            "longitude": longitude,
            "name": name,
            "address": address,
        },
    )


def sticker_payload(
    to: str,
    sticker: str,
    link: bool = True,
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    return _message(to, "sticker", recipient_type, sticker=_media_object(sticker, link))


def image_payload(
    to: str,
    image: str,
    caption: Optional[str] = None,
    link: bool = True,
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    return _message(to, "image", recipient_type, image=_media_object(image, link, caption=caption))


def audio_payload(
    to: str,
    audio: str,
    link: bool = True,
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    return _message(to, "audio", recipient_type, audio=_media_object(audio, link))


def video_payload(
    to: str,
    video: str,
    caption: Optional[str] = None,
    link: bool = True,
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    return _message(to, "video", recipient_type, video=_media_object(video, link, caption=caption))


def document_payload(
    to: str,
    document: str,
    filename: Optional[str] = None,
    caption: Optional[str] = None,
    link: bool = True,
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    return _message(
        to,
        "document",
        recipient_type,
        document=_media_object(document, link, caption=caption, filename=filename),
    )


def contacts_payload(
    to: str,
    contacts: List[Dict[str, Any]],
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    return _message(to, "contacts", recipient_type, contacts=contacts)


def template_payload(
    to: str,
    name: str,
    language_code: str,
    components: Optional[List[Dict[str, Any]]] = None,
    recipient_type: str = "individual",
) -> Dict[str, Any]:
    template: Dict[str, Any] = {"name": name, "language": {"code": language_code}}
    if components:
        template["components"] = components
    return _message(to, "template", recipient_type, template=template)


def mark_read_payload(message_id: str) -> Dict[str, Any]:
    return {
        "messaging_product": MESSAGING_PRODUCT,
        "status": "read",
        "message_id": message_id,
    }

"""Handoff URLs for messaging, social and email channels.

These links carry text only. The image itself cannot be attached through a
URL, which is why the handoff path downloads the file first.
"""

from urllib.parse import quote

from wedding_gallery.domain.sharing import ShareTarget

# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"

FACEBOOK_HOME = "https://www.facebook.com/"
INSTAGRAM_HOME = "https://www.instagram.com/"


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def compose_text(message: str, page_url: str | None = None) -> str:
    if page_url:
        return f"{message}\n\n{page_url}" if message else page_url
    return message


def whatsapp_url(message: str, page_url: str | None = None) -> str:
    return f"https://wa.me/?text={encode_component(compose_text(message, page_url))}"


def facebook_url(page_url: str | None = None) -> str:
    if not page_url:
        return FACEBOOK_HOME
    return f"https://www.facebook.com/sharer/sharer.php?u={encode_component(page_url)}"


def instagram_url() -> str:
    return INSTAGRAM_HOME


def mailto_url(subject: str, body: str) -> str:
    return (
        f"mailto:?subject={encode_component(subject)}"
        f"&body={encode_component(body)}"
    )


def handoff_url(
    target: ShareTarget,
    message: str,
    email_subject: str,
    page_url: str | None = None,
) -> str | None:
    """Return the next-step URL for a target, or None when it has none."""
    if target is ShareTarget.WHATSAPP:
        return whatsapp_url(message, page_url)
    if target is ShareTarget.FACEBOOK:
        return facebook_url(page_url)
    if target is ShareTarget.INSTAGRAM:
        return instagram_url()
    if target is ShareTarget.EMAIL:
        return mailto_url(email_subject, compose_text(message, page_url))
    return None

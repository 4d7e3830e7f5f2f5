"""Public URL and share-link formatting for published pages."""

import re
from urllib.parse import quote

from salesdesk.models.page import PageDocument
from salesdesk.models.response import ShareLinksResponse

# Characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def _encode(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def public_url(base_domain: str, slug: str) -> str:
    return f"https://{base_domain}/p/{slug or 'untitled'}"


def messaging_link(phone_number: str, message: str = "") -> str:
    """Return a WhatsApp click-to-chat link for *phone_number*."""
    digits = re.sub(r"\D", "", phone_number)
    link = f"https://wa.me/{digits}"
    return f"{link}?text={_encode(message)}" if message else link


def qr_code_url(qr_endpoint: str, url: str, size: int = 150) -> str:
    return f"{qr_endpoint}?size={size}x{size}&data={_encode(url)}"


def share_links(document: PageDocument, base_domain: str, qr_endpoint: str) -> ShareLinksResponse:
    live_url = public_url(base_domain, document.slug)
    encoded_url = _encode(live_url)
    encoded_text = _encode(f"Check out this offer: {document.title}")
    return ShareLinksResponse(
        public_url=live_url,
        whatsapp=f"https://wa.me/?text={encoded_text}%20{encoded_url}",
        facebook=f"https://www.facebook.com/sharer/sharer.php?u={encoded_url}",
        qr_code=qr_code_url(qr_endpoint, live_url),
    )


def resolve_ctas(document: PageDocument) -> PageDocument:
    """Fill messaging CTAs without an explicit URL with the page's WhatsApp link."""
    if not document.whatsapp_number:
        return document
    chat_url = messaging_link(document.whatsapp_number, document.whatsapp_message)
    ctas = [
        cta.model_copy(update={"url": chat_url})
        if cta.action_type == "messaging-deeplink" and not cta.url
        else cta
        for cta in document.ctas
    ]
    return document.model_copy(update={"ctas": ctas})

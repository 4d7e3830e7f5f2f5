"""Draft / Published transitions for pages.

``publish`` is refused while the page has no title, has a malformed slug, or
shares its slug with any other page.  ``unpublish`` is always allowed.  Both
are no-ops when the page is already in the target state.
"""

import logging
from enum import Enum

from salesdesk.errors import SlugConflict, ValidationError
from salesdesk.models.page import PageDocument
from salesdesk.services.slugs import is_valid_slug
from salesdesk.services.store import PageStore

logger = logging.getLogger(__name__)


class PublishState(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


def state_of(document: PageDocument) -> PublishState:
    return PublishState.PUBLISHED if document.is_published else PublishState.DRAFT


def publish(store: PageStore, page_id: str) -> PageDocument:
    """Move the page to Published.

    Raises:
        ValidationError: if the title is empty or the slug is empty/malformed.
        SlugConflict: if another page already uses the slug.
    """

    def guard(document: PageDocument) -> None:
        if not document.title.strip():
            raise ValidationError("Add a page title before publishing.", field="title")
        if not is_valid_slug(document.slug):
            raise ValidationError("Set a valid URL slug before publishing.", field="slug")
        if store.slug_taken(document.id, document.slug):
            logger.warning(
                "Publish blocked by slug conflict",
                extra={"page_id": document.id, "slug": document.slug},
            )
            raise SlugConflict(document.slug)

    document = store.set_published(page_id, True, guard=guard)
    logger.info("Page published", extra={"page_id": page_id, "slug": document.slug})
    return document


def unpublish(store: PageStore, page_id: str) -> PageDocument:
    document = store.set_published(page_id, False)
    logger.info("Page unpublished", extra={"page_id": page_id})
    return document


def toggle_publish(store: PageStore, page_id: str) -> PageDocument:
    """Publish a draft or unpublish a published page."""
    if state_of(store.get(page_id)) == PublishState.PUBLISHED:
        return unpublish(store, page_id)
    return publish(store, page_id)

"""The page collection: creation defaults, the generic field updater, deletion.

Documents handed out by :class:`PageStore` are copies of frozen models; the
only way to change a stored page is :meth:`PageStore.update` or, for the
publish flag, :meth:`PageStore.set_published` (used by the publish state
machine).
"""

import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Set, Union

from pydantic import ValidationError as PydanticValidationError

from salesdesk.config import Settings, get_settings
from salesdesk.errors import PageNotFound, SlugConflict, StaleVersion, ValidationError
from salesdesk.models.page import CTAButton, Package, PageDocument, PageType, new_id, utc_now
from salesdesk.services import registry
from salesdesk.services.document_store import DocumentStore, InMemoryDocumentStore
from salesdesk.services.pricing import recompute_packages
from salesdesk.services.slugs import is_valid_slug, slugify

logger = logging.getLogger(__name__)

DEFAULT_REFUND_POLICY = "30-day money-back guarantee."

# Fields the generic updater must never write
PROTECTED_FIELDS = frozenset(
    {"id", "type", "is_published", "slug_is_custom", "version", "last_saved_at"}
)

PublishGuard = Callable[[PageDocument], None]


class PageStore:
    """Owns every :class:`PageDocument` and the slug index over them."""

    def __init__(
        self,
        documents: Optional[DocumentStore[PageDocument]] = None,
        settings: Optional[Settings] = None,
    ):
        self._documents: DocumentStore[PageDocument] = documents or InMemoryDocumentStore()
        self._settings = settings or get_settings()
        self._lock = threading.RLock()
        self._slugs: Dict[str, Set[str]] = defaultdict(set)
        for document in self._documents.values():
            self._slugs[document.slug].add(document.id)

    # ------------------------------------------------------------------
    # Collection contract
    # ------------------------------------------------------------------

    def create(self, page_type: Union[PageType, str]) -> PageDocument:
        """Create a draft of *page_type* seeded with that type's defaults."""
        payloads = registry.default_payloads(page_type)
        page_type = PageType(page_type)
        page_id = new_id()

        document = PageDocument(
            id=page_id,
            type=page_type,
            slug=_placeholder_slug(page_type, page_id),
            currency=self._settings.default_currency,
            ctas=_default_ctas(page_type),
            packages=[Package(description="Best value for money")]
            if page_type == PageType.BUNDLE
            else [],
            refund_policy=DEFAULT_REFUND_POLICY,
            **payloads,
        )

        with self._lock:
            self._documents.put(page_id, document)
            self._slugs[document.slug].add(page_id)

        logger.info("Page created", extra={"page_id": page_id, "type": page_type.value})
        return document.model_copy(deep=True)

    def get(self, page_id: str) -> PageDocument:
        with self._lock:
            return self._require(page_id).model_copy(deep=True)

    def list(self) -> List[PageDocument]:
        with self._lock:
            return [document.model_copy(deep=True) for document in self._documents.values()]

    def update(
        self,
        page_id: str,
        field: str,
        value,
        expected_version: Optional[int] = None,
    ) -> PageDocument:
        """Set one field of a page and return the updated page.

        Title edits re-derive the slug until the slug has been edited
        directly; any direct slug edit makes the slug custom for good.
        A published page may only move to a well-formed slug no other page
        uses.
        Product and package edits re-derive every package total.

        Raises:
            PageNotFound: if *page_id* does not exist.
            StaleVersion: if *expected_version* is given and out of date.
            SlugConflict: if a published page would take a slug in use elsewhere.
            ValidationError: if the field is protected, unknown, not valid for
                the page type, or *value* fails validation.
        """
        with self._lock:
            current = self._require(page_id)
            if expected_version is not None and expected_version != current.version:
                raise StaleVersion(page_id, expected_version, current.version)

            changes = self._changes_for(current, field, value)
            updated = _validated(current, changes, field)
            if current.is_published and updated.slug != current.slug:
                self._check_live_slug(updated)
            if field in ("products", "packages"):
                updated = updated.model_copy(
                    update={"packages": recompute_packages(updated.packages, updated.products)}
                )
            updated = self._save(current, updated)

        logger.info(
            "Page updated",
            extra={"page_id": page_id, "field": field, "version": updated.version},
        )
        return updated.model_copy(deep=True)

    def delete(self, page_id: str) -> None:
        """Remove a page; its slug is free for reuse as soon as this returns."""
        with self._lock:
            document = self._require(page_id)
            self._documents.delete(page_id)
            self._release_slug(document.slug, page_id)
        logger.info("Page deleted", extra={"page_id": page_id, "slug": document.slug})

    # ------------------------------------------------------------------
    # Slug lookups
    # ------------------------------------------------------------------

    def slug_taken(self, page_id: str, slug: str) -> bool:
        """Return True if a page other than *page_id* uses *slug*."""
        with self._lock:
            return bool(self._slugs.get(slug, set()) - {page_id})

    def find_published(self, slug: str) -> Optional[PageDocument]:
        """Resolve a public ``/p/{slug}`` URL to its published page, if any."""
        with self._lock:
            for page_id in sorted(self._slugs.get(slug, set())):
                document = self._documents.get(page_id)
                if document is not None and document.is_published:
                    return document.model_copy(deep=True)
        return None

    # ------------------------------------------------------------------
    # Publish flag
    # ------------------------------------------------------------------

    def set_published(
        self, page_id: str, published: bool, guard: Optional[PublishGuard] = None
    ) -> PageDocument:
        """Write ``is_published``; reserved for the publish state machine.

        *guard* runs under the store lock with the current document and may
        raise to refuse the transition.
        """
        with self._lock:
            current = self._require(page_id)
            if current.is_published == published:
                return current.model_copy(deep=True)
            if guard is not None:
                guard(current)
            updated = self._save(current, current.model_copy(update={"is_published": published}))
        return updated.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require(self, page_id: str) -> PageDocument:
        document = self._documents.get(page_id)
        if document is None:
            raise PageNotFound(page_id)
        return document

    def _changes_for(self, current: PageDocument, field: str, value) -> dict:
        if field in PROTECTED_FIELDS:
            raise ValidationError(f"Field '{field}' cannot be edited directly.", field=field)
        if field not in PageDocument.model_fields:
            raise ValidationError(f"Unknown field '{field}'.", field=field)
        if field in registry.ALL_PAYLOAD_FIELDS and field not in registry.payload_fields(current.type):
            raise ValidationError(
                f"Field '{field}' does not apply to {current.type.value} pages.", field=field
            )

        if field == "title":
            if not isinstance(value, str):
                raise ValidationError("Title must be text.", field=field)
            changes = {"title": value}
            if not current.slug_is_custom:
                changes["slug"] = slugify(value) or _placeholder_slug(current.type, current.id)
            return changes

        if field == "slug":
            if not isinstance(value, str):
                raise ValidationError("Slug must be text.", field=field)
            if value and not is_valid_slug(value):
                raise ValidationError(
                    "Slug may only contain lowercase letters, digits and single hyphens "
                    "(at most 50 characters).",
                    field=field,
                )
            return {"slug": value, "slug_is_custom": True}

        return {field: value}

    def _check_live_slug(self, updated: PageDocument) -> None:
        if not is_valid_slug(updated.slug):
            raise ValidationError(
                "A published page needs a valid URL slug. Unpublish it before clearing the slug.",
                field="slug",
            )
        if self.slug_taken(updated.id, updated.slug):
            logger.warning(
                "Slug change on published page blocked by conflict",
                extra={"page_id": updated.id, "slug": updated.slug},
            )
            raise SlugConflict(updated.slug)

    def _save(self, current: PageDocument, updated: PageDocument) -> PageDocument:
        updated = updated.model_copy(
            update={"version": current.version + 1, "last_saved_at": utc_now()}
        )
        self._documents.put(updated.id, updated)
        if updated.slug != current.slug:
            self._release_slug(current.slug, current.id)
            self._slugs[updated.slug].add(updated.id)
        return updated

    def _release_slug(self, slug: str, page_id: str) -> None:
        owners = self._slugs.get(slug)
        if owners is None:
            return
        owners.discard(page_id)
        if not owners:
            del self._slugs[slug]


def _validated(current: PageDocument, changes: dict, field: str) -> PageDocument:
    data = current.model_dump()
    data.update(changes)
    try:
        return PageDocument.model_validate(data)
    except PydanticValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ValidationError(f"Invalid value for '{field}': {messages}", field=field) from exc


def _placeholder_slug(page_type: PageType, page_id: str) -> str:
    return slugify(f"{page_type.value} page {page_id[:8]}")


def _default_ctas(page_type: PageType) -> List[CTAButton]:
    if page_type == PageType.CAPTURE:
        return [
            CTAButton(
                id="default-cta",
                label="Chat on WhatsApp",
                action_type="messaging-deeplink",
                url="",
            )
        ]
    return [
        CTAButton(
            id="default-cta",
            label="Buy Now",
            action_type="scroll-to-section",
            style="primary",
            url="#products",
        )
    ]

from typing import List

from fastapi import APIRouter, Depends, Query, Response

from salesdesk.config import Settings
from salesdesk.dependencies import get_app_settings, get_store
from salesdesk.models.page import PageDocument
from salesdesk.models.request import CreatePageRequest, FieldUpdateRequest, PackageMemberRequest
from salesdesk.models.response import (
    PublishResponse,
    SeoScoreResponse,
    ShareLinksResponse,
    SlugCheckResponse,
)
from salesdesk.models.workflow import WorkflowResponse
from salesdesk.services import publishing, registry
from salesdesk.services.pricing import add_product, remove_product
from salesdesk.services.seo import seo_rating, seo_score
from salesdesk.services.sharing import public_url, share_links
from salesdesk.services.slugs import is_valid_slug
from salesdesk.services.store import PageStore

router = APIRouter(prefix="/pages", tags=["pages"])


@router.get("", response_model=List[PageDocument], summary="List all pages")
async def list_pages(store: PageStore = Depends(get_store)) -> List[PageDocument]:
    return store.list()


@router.post("", response_model=PageDocument, status_code=201, summary="Create a page of a given type")
async def create_page(body: CreatePageRequest, store: PageStore = Depends(get_store)) -> PageDocument:
    return store.create(body.type)


@router.get("/{page_id}", response_model=PageDocument, summary="Fetch one page")
async def get_page(page_id: str, store: PageStore = Depends(get_store)) -> PageDocument:
    return store.get(page_id)


@router.patch("/{page_id}", response_model=PageDocument, summary="Update a single page field")
async def update_page(
    page_id: str, body: FieldUpdateRequest, store: PageStore = Depends(get_store)
) -> PageDocument:
    """Apply one keyed field edit.

    ``title`` edits re-derive the slug until ``slug`` has been edited
    directly.  ``products`` and ``packages`` edits re-derive package totals.
    ``is_published`` is rejected here; use the publish endpoints.
    """
    return store.update(page_id, body.field, body.value, expected_version=body.expected_version)


@router.delete("/{page_id}", status_code=204, summary="Delete a page and release its slug")
async def delete_page(page_id: str, store: PageStore = Depends(get_store)) -> Response:
    store.delete(page_id)
    return Response(status_code=204)


@router.get("/{page_id}/workflow", response_model=WorkflowResponse, summary="Editing steps for a page")
async def page_workflow(page_id: str, store: PageStore = Depends(get_store)) -> WorkflowResponse:
    page_type = store.get(page_id).type
    return WorkflowResponse(
        type=page_type,
        label=registry.type_label(page_type),
        steps=registry.get_workflow(page_type),
    )


@router.get("/{page_id}/slug-check", response_model=SlugCheckResponse, summary="Live slug availability")
async def slug_check(
    page_id: str,
    slug: str = Query(..., description="Candidate slug to check against every other page."),
    store: PageStore = Depends(get_store),
) -> SlugCheckResponse:
    """Non-blocking feedback for the slug field; nothing is saved."""
    store.get(page_id)
    return SlugCheckResponse(
        slug=slug,
        valid=is_valid_slug(slug),
        available=not store.slug_taken(page_id, slug),
    )


# ── Publishing ────────────────────────────────────────────────────────────────

def _publish_response(document: PageDocument, settings: Settings) -> PublishResponse:
    state = publishing.state_of(document)
    return PublishResponse(
        id=document.id,
        state=state.value,
        slug=document.slug,
        public_url=public_url(settings.base_domain, document.slug)
        if state == publishing.PublishState.PUBLISHED
        else None,
    )


@router.post("/{page_id}/publish", response_model=PublishResponse, summary="Publish a page")
async def publish_page(
    page_id: str,
    store: PageStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> PublishResponse:
    return _publish_response(publishing.publish(store, page_id), settings)


@router.post("/{page_id}/unpublish", response_model=PublishResponse, summary="Return a page to draft")
async def unpublish_page(
    page_id: str,
    store: PageStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> PublishResponse:
    return _publish_response(publishing.unpublish(store, page_id), settings)


@router.post("/{page_id}/toggle-publish", response_model=PublishResponse, summary="Flip publish state")
async def toggle_publish_page(
    page_id: str,
    store: PageStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> PublishResponse:
    return _publish_response(publishing.toggle_publish(store, page_id), settings)


# ── Package membership ────────────────────────────────────────────────────────

@router.post(
    "/{page_id}/packages/{package_id}/products",
    response_model=PageDocument,
    summary="Add a product to a bundle",
)
async def add_package_product(
    page_id: str,
    package_id: str,
    body: PackageMemberRequest,
    store: PageStore = Depends(get_store),
) -> PageDocument:
    page = store.get(page_id)
    packages = add_product(page.packages, package_id, body.product_id, page.products)
    return store.update(
        page_id, "packages", [p.model_dump() for p in packages], expected_version=page.version
    )


@router.delete(
    "/{page_id}/packages/{package_id}/products/{product_id}",
    response_model=PageDocument,
    summary="Remove a product from a bundle",
)
async def remove_package_product(
    page_id: str,
    package_id: str,
    product_id: str,
    store: PageStore = Depends(get_store),
) -> PageDocument:
    page = store.get(page_id)
    packages = remove_product(page.packages, package_id, product_id, page.products)
    return store.update(
        page_id, "packages", [p.model_dump() for p in packages], expected_version=page.version
    )


@router.get("/{page_id}/share", response_model=ShareLinksResponse, summary="Public URL and share links")
async def page_share_links(
    page_id: str,
    store: PageStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> ShareLinksResponse:
    return share_links(store.get(page_id), settings.base_domain, settings.qr_endpoint)


@router.get("/{page_id}/seo", response_model=SeoScoreResponse, summary="Search-readiness score")
async def page_seo_score(page_id: str, store: PageStore = Depends(get_store)) -> SeoScoreResponse:
    score = seo_score(store.get(page_id), store.list())
    return SeoScoreResponse(score=score, rating=seo_rating(score))

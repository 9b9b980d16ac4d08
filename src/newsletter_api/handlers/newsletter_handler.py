"""HTTP handlers for newsletter operations."""

from newsletter_api.dto import (
    CreateNewsletterRequest,
    NewsletterItem,
    NewsletterListResponse,
    UpdateNewsletterRequest,
)
from newsletter_api.entities import RequestContext
from newsletter_api.services import NewsletterService


class NewsletterHandler:
    """HTTP handlers for newsletters.

    Mutating handlers take the caller's ``RequestContext`` explicitly; the
    service checks ownership against the persistent store.
    """

    def __init__(self, newsletter_service: NewsletterService) -> None:
        self._newsletters = newsletter_service

    async def list_newsletters(self) -> NewsletterListResponse:
        result = await self._newsletters.list()
        return NewsletterListResponse(
            cache=result.origin.value,
            data=[NewsletterItem.model_validate(record) for record in result.records],
        )

    async def get_newsletter(self, newsletter_id: int) -> NewsletterItem:
        return NewsletterItem.model_validate(await self._newsletters.get(newsletter_id))

    async def create_newsletter(self, context: RequestContext, request: CreateNewsletterRequest) -> NewsletterItem:
        record = await self._newsletters.create(
            context,
            title=request.title,
            description=request.description,
            image_url=request.image_url,
        )
        return NewsletterItem.model_validate(record)

    async def update_newsletter(
        self,
        context: RequestContext,
        newsletter_id: int,
        request: UpdateNewsletterRequest,
    ) -> NewsletterItem:
        record = await self._newsletters.update(context, newsletter_id, request.changes())
        return NewsletterItem.model_validate(record)

    async def delete_newsletter(self, context: RequestContext, newsletter_id: int) -> None:
        await self._newsletters.delete(context, newsletter_id)

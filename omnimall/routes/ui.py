"""UI bootstrap endpoints.

GET /v1/ui/home - Merchandised home page sections.

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Depends

from omnimall.deps import get_gateway, get_page_cache
from omnimall.models import Product, Profile
from omnimall.schemas import MerchandisedContentResponse, ProductCard, SellerCard
from omnimall.services.merchandising import assemble
from omnimall.stores.gateway import Gateway
from omnimall.stores.redis import PageCache

router = APIRouter()

HOME_PATH = "/"


@router.get("/home", response_model=MerchandisedContentResponse)
async def get_home(
    gateway: Gateway = Depends(get_gateway),
    pages: PageCache = Depends(get_page_cache),
) -> MerchandisedContentResponse:
    """Get home page sections.

    Served from the page cache until a merchandising save marks "/" stale.
    """
    cached = await pages.get(HOME_PATH)
    if cached is not None:
        return MerchandisedContentResponse.model_validate(cached)

    content = await assemble(gateway)
    response = MerchandisedContentResponse(
        sections={section: [_to_card(item) for item in items] for section, items in content.items()}
    )
    await pages.set(HOME_PATH, response.model_dump(by_alias=True, mode="json"))
    return response


def _to_card(item: Product | Profile) -> ProductCard | SellerCard:
    if isinstance(item, Product):
        return ProductCard(
            id=item.id,
            name=item.name,
            price=item.price,
            category=item.category,
            image_urls=item.image_urls or [],
            location=item.location,
            seller_id=item.seller_id,
        )
    return SellerCard(
        id=item.id,
        display_name=item.display_name,
        avatar_url=item.avatar_url,
        location=item.location,
    )

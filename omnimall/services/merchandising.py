"""Merchandising assembler for the home page.

Read path (assemble):
1. Fetch every entry ordered by position
2. Split item ids by type (product / seller)
3. Resolve each type in one batched lookup (approved products, verified sellers)
4. Walk the entries once, appending resolved items to their section

Entries whose item no longer resolves (deleted, unapproved, unverified)
are skipped silently. Sections that end up empty are omitted.

Write path (replace_all): delete every entry, then insert the new set with
position = index within its section. By default the delete is committed
before the insert, so a failed insert leaves no entries at all. With
strict=True both run in one transaction.
"""

from collections.abc import Iterable, Sequence
import logging

from omnimall.errors import OmnimallError
from omnimall.models import MerchandisingEntry, Product, Profile
from omnimall.models.merchandising import ITEM_PRODUCT, ITEM_SELLER
from omnimall.schemas.common import ActionResult
from omnimall.schemas.merchandising import SectionItems
from omnimall.stores.gateway import Gateway
from omnimall.stores.redis import PageCache

logger = logging.getLogger("uvicorn.error")

MERCHANDISING_VIEW_PATHS = ("/", "/admin/merchandising")

MerchandisedContent = dict[str, list[Product | Profile]]


async def assemble(gateway: Gateway) -> MerchandisedContent:
    """Build section_id -> ordered resolved items.

    Raises:
        DependencyError: If a lookup fails.
    """
    entries = await gateway.list_merchandising_entries()

    product_ids = _unique(e.item_id for e in entries if e.item_type == ITEM_PRODUCT)
    seller_ids = _unique(e.item_id for e in entries if e.item_type == ITEM_SELLER)

    products: dict[str, Product] = {}
    if product_ids:
        products = {p.id: p for p in await gateway.get_approved_products(product_ids)}

    sellers: dict[str, Profile] = {}
    if seller_ids:
        sellers = {s.id: s for s in await gateway.get_verified_sellers(seller_ids)}

    content: MerchandisedContent = {}
    for entry in entries:
        if entry.item_type == ITEM_PRODUCT:
            item = products.get(entry.item_id)
        elif entry.item_type == ITEM_SELLER:
            item = sellers.get(entry.item_id)
        else:
            item = None
        if item is None:
            continue
        content.setdefault(entry.section_id, []).append(item)

    return content


async def list_entries(gateway: Gateway) -> list[MerchandisingEntry]:
    """Raw entries for the admin editor, in position order."""
    return await gateway.list_merchandising_entries()


def build_entries(sections: Sequence[SectionItems]) -> list[MerchandisingEntry]:
    """One entry per (section, item), position = index within the section."""
    return [
        MerchandisingEntry(
            section_id=section.section_id,
            item_id=ref.id,
            item_type=ref.type,
            position=position,
        )
        for section in sections
        for position, ref in enumerate(section.items)
    ]


async def replace_all(
    *,
    gateway: Gateway,
    pages: PageCache,
    sections: Sequence[SectionItems],
    strict: bool = False,
) -> ActionResult:
    """Replace the whole merchandising set.

    Args:
        gateway: Table gateway bound to the request's session.
        pages: Page cache to mark the home page stale.
        sections: Every section's ordered items. Sections left out lose their entries.
        strict: Run delete and insert in one transaction.
    """
    entries = build_entries(sections)

    try:
        await gateway.delete_all_merchandising_entries()
        if not strict:
            await gateway.commit()
    except OmnimallError as e:
        logger.error(f"Failed to clear merchandising entries: {e.message}")
        await gateway.abort()
        return ActionResult.from_error(e)

    try:
        if entries:
            await gateway.insert_merchandising_entries(entries)
        await gateway.commit()
    except OmnimallError as e:
        await gateway.abort()
        if strict:
            logger.error(f"Failed to save merchandising entries, previous set kept: {e.message}")
        else:
            logger.error(
                f"Failed to save merchandising entries after clearing them; home page sections are empty: {e.message}"
            )
            await pages.invalidate(*MERCHANDISING_VIEW_PATHS)
        return ActionResult.from_error(e)

    logger.info(f"Merchandising replaced: {len(entries)} entries in {len(sections)} section(s)")
    await pages.invalidate(*MERCHANDISING_VIEW_PATHS)
    return ActionResult.ok()


def _unique(ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(ids))

"""Pydantic schemas for API request/response validation."""

from omnimall.schemas.common import ActionResult, ErrorDetail, ErrorResponse
from omnimall.schemas.merchandising import (
    ItemRef,
    MerchandisedContentResponse,
    MerchandisingEntryOut,
    ProductCard,
    ReplaceMerchandisingRequest,
    SectionItems,
    SellerCard,
)
from omnimall.schemas.moderation import ProductStatusRequest
from omnimall.schemas.notifications import (
    CreateLiveNotificationRequest,
    LiveNotificationOut,
    SetActiveRequest,
)
from omnimall.schemas.orders import ApproveOrderRequest
from omnimall.schemas.verification import VerificationForm

__all__ = [
    "ActionResult",
    "ErrorDetail",
    "ErrorResponse",
    "ItemRef",
    "MerchandisedContentResponse",
    "MerchandisingEntryOut",
    "ProductCard",
    "ReplaceMerchandisingRequest",
    "SectionItems",
    "SellerCard",
    "CreateLiveNotificationRequest",
    "LiveNotificationOut",
    "SetActiveRequest",
    "ProductStatusRequest",
    "ApproveOrderRequest",
    "VerificationForm",
]

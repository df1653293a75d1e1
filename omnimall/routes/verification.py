"""Seller verification endpoint.

POST /v1/verification - multipart form with the selfie file.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from omnimall.deps import get_gateway, get_page_cache, get_storage_client
from omnimall.routes.responses import ensure_success
from omnimall.schemas import ActionResult
from omnimall.services.verification import SelfieImage, submit_verification
from omnimall.settings import Settings, get_settings
from omnimall.stores.gateway import Gateway
from omnimall.stores.redis import PageCache
from omnimall.stores.storage import StorageClient

router = APIRouter()


@router.post("", response_model=ActionResult)
async def submit(
    user_id: str = Form(default=""),
    full_name: str = Form(default=""),
    business_name: str = Form(default=""),
    location: str = Form(default=""),
    business_email: str = Form(default=""),
    business_phone: str = Form(default=""),
    selfie: UploadFile | None = File(default=None),
    gateway: Gateway = Depends(get_gateway),
    storage: StorageClient = Depends(get_storage_client),
    pages: PageCache = Depends(get_page_cache),
    settings: Settings = Depends(get_settings),
) -> ActionResult:
    """Submit a verification selfie and become a verified seller.

    Fields are validated by the service so every invalid field is reported at once.
    """
    image = None
    if selfie is not None:
        image = SelfieImage(
            content=await selfie.read(),
            content_type=selfie.content_type or "image/jpeg",
            filename=selfie.filename,
        )

    result = await submit_verification(
        gateway=gateway,
        storage=storage,
        pages=pages,
        user_id=user_id,
        fields={
            "full_name": full_name,
            "business_name": business_name,
            "location": location,
            "business_email": business_email,
            "business_phone": business_phone,
        },
        selfie=image,
        bucket=settings.verification_bucket,
    )
    return ensure_success(result)

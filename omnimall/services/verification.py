"""Seller verification workflow.

1. Validate the form fields and the selfie (no side effects on failure)
2. Upload the selfie under seller_verifications/{user_id}/selfie-{ms}.{ext}
3. Promote the profile in one update: verified flag, name, phone, location, avatar
4. If the profile update fails, delete the uploaded selfie before returning

This is the only workflow that compensates its own earlier step.
"""

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from omnimall.errors import NotFoundError, OmnimallError, ValidationError
from omnimall.schemas.common import ActionResult
from omnimall.schemas.verification import VerificationForm
from omnimall.stores.gateway import Gateway
from omnimall.stores.redis import PageCache
from omnimall.stores.storage import StorageClient

logger = logging.getLogger("uvicorn.error")

VERIFICATION_VIEW_PATHS = ("/", "/profile", "/admin/sellers")

_CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


@dataclass(frozen=True)
class SelfieImage:
    content: bytes
    content_type: str = "image/jpeg"
    filename: str | None = None

    @property
    def extension(self) -> str:
        if self.filename and "." in self.filename:
            ext = self.filename.rsplit(".", 1)[-1].lower()
            if ext.isalnum():
                return ext
        return _CONTENT_TYPE_EXTENSIONS.get(self.content_type, "jpg")


def parse_form(fields: Mapping[str, Any]) -> VerificationForm:
    """Validate raw form fields.

    Raises:
        ValidationError: With one message per invalid field.
    """
    try:
        return VerificationForm.model_validate(dict(fields))
    except PydanticValidationError as e:
        field_errors: dict[str, str] = {}
        for err in e.errors():
            name = ".".join(str(part) for part in err["loc"]) or "form"
            field_errors.setdefault(name, err["msg"])
        raise ValidationError("Invalid verification details.", field_errors=field_errors) from e


def validate_submission(
    user_id: str,
    fields: Mapping[str, Any],
    selfie: SelfieImage | None,
) -> VerificationForm:
    """Validate form fields, user id and selfie together.

    Raises:
        ValidationError: Listing every invalid field at once.
    """
    field_errors: dict[str, str] = {}
    form = None
    try:
        form = parse_form(fields)
    except ValidationError as e:
        field_errors.update(e.field_errors)
    if not user_id:
        field_errors["user_id"] = "required"
    if selfie is None or not selfie.content:
        field_errors["selfie"] = "required"

    if field_errors or form is None:
        raise ValidationError("Invalid verification details.", field_errors=field_errors)
    return form


def selfie_path(user_id: str, extension: str, now_ms: int | None = None) -> str:
    """Storage path namespaced by user and upload time."""
    ts = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"seller_verifications/{user_id}/selfie-{ts}.{extension}"


async def submit_verification(
    *,
    gateway: Gateway,
    storage: StorageClient,
    pages: PageCache,
    user_id: str,
    fields: Mapping[str, Any],
    selfie: SelfieImage | None,
    bucket: str = "profile-images",
) -> ActionResult:
    """Verify a seller from their form and selfie.

    Returns:
        ActionResult; field_errors is set when the form is invalid.
    """
    try:
        form = validate_submission(user_id, fields, selfie)
    except ValidationError as e:
        return ActionResult.from_error(e)

    path = selfie_path(user_id, selfie.extension)
    try:
        await storage.upload(bucket, path, selfie.content, content_type=selfie.content_type, upsert=True)
    except OmnimallError as e:
        logger.error(f"Selfie upload failed for user {user_id}: {e.message}")
        return ActionResult.fail("Selfie upload failed. Please try again.", code=e.code)

    avatar_url = storage.public_url(bucket, path)

    try:
        updated = await gateway.update_profile(
            user_id,
            {
                "is_verified_seller": True,
                "display_name": form.full_name,
                "phone_number": form.business_phone,
                "location": form.location,
                "avatar_url": avatar_url,
            },
        )
        if not updated:
            raise NotFoundError(f"Profile {user_id} not found")
        await gateway.commit()
    except OmnimallError as e:
        logger.error(f"Profile update failed for user {user_id}, removing uploaded selfie: {e.message}")
        await _discard_upload(storage, bucket, path)
        await gateway.abort()
        return ActionResult.fail("Failed to update profile. Please try again.", code=e.code)

    logger.info(f"User {user_id} verified as seller ({form.business_name})")
    await pages.invalidate(*VERIFICATION_VIEW_PATHS)
    return ActionResult.ok()


async def _discard_upload(storage: StorageClient, bucket: str, path: str) -> None:
    """Best-effort delete of an orphaned upload."""
    try:
        await storage.remove(bucket, [path])
    except OmnimallError as e:
        logger.warning(f"Could not delete orphaned upload {bucket}/{path}: {e.message}")

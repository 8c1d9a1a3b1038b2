"""
Admin API - moderation of trainer accounts and listings.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, field_validator

from marketplace_api.application.interfaces.di_container import get_listing_service, get_trainer_service
from marketplace_api.application.services.listing_service import ListingService
from marketplace_api.application.services.trainer_service import TrainerService
from shared.utils.constants import DEFAULT_USER_NAME
from shared.utils.convert import to_json_safe
from shared.utils.exceptions import (
    ListingNotFoundException,
    TableStorageException,
    TrainerNotFoundException,
)
from shared.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    responses={
        404: {"description": "Resource not found"},
        500: {"description": "Internal server error"},
    }
)


class ApprovalRequest(BaseModel):
    """Optional body for approve requests."""

    approver_name: Optional[str] = Field(
        None, description="Name of the admin approving the record"
    )

    @field_validator("approver_name")
    def validate_approver_name(cls, value):
        if value is not None and not value.strip():
            raise ValueError("Approver name cannot be empty")
        return value

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "approver_name": "Jane Admin",
            }
        }
    )


def _storage_error(message: str, e: Exception, **context) -> HTTPException:
    logger.error(
        message,
        extra={**context, "error_type": type(e).__name__, "error_details": str(e)},
        exc_info=True,
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=message,
    )


# ==================== Trainers ====================

@router.get("/trainers")
async def get_trainers(
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> dict:
    """Get every approved trainer."""
    try:
        trainers = await trainer_service.get_approved_trainers()
    except TableStorageException as e:
        raise _storage_error("Failed to retrieve trainers", e)

    return {
        "status": "success",
        "trainers": [to_json_safe(t.to_public_dict()) for t in trainers],
    }


@router.get("/trainers/pending")
async def get_pending_trainers(
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> dict:
    """Get trainers waiting for approval."""
    try:
        pending_trainers = await trainer_service.get_pending_trainers()
    except TableStorageException as e:
        raise _storage_error("Failed to retrieve pending trainers", e)

    logger.info("Pending trainers retrieved", extra={"result_count": len(pending_trainers)})
    return {
        "status": "success",
        "pending_trainers": [to_json_safe(t.to_public_dict()) for t in pending_trainers],
    }


@router.patch("/trainers/{trainer_id}/approve")
async def approve_pending_trainer(
    trainer_id: str,
    request: Optional[ApprovalRequest] = None,
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> dict:
    """Approve a pending trainer account."""
    approver_name = (request.approver_name if request else None) or DEFAULT_USER_NAME

    try:
        trainer = await trainer_service.approve_trainer(trainer_id, approver_name)
    except TrainerNotFoundException as e:
        logger.warning(
            "Trainer not found for approval",
            extra={"trainer_id": trainer_id, "error_details": str(e)},
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trainer not found")
    except TableStorageException as e:
        raise _storage_error("Failed to approve trainer", e, trainer_id=trainer_id)

    return {
        "message": "Trainer approved successfully",
        "trainer": to_json_safe(trainer.to_public_dict()),
    }


@router.delete("/trainers/{trainer_id}")
async def discard_pending_trainer(
    trainer_id: str,
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> dict:
    """Delete a trainer account."""
    try:
        trainer = await trainer_service.discard_trainer(trainer_id)
    except TrainerNotFoundException as e:
        logger.warning(
            "Trainer not found for discard",
            extra={"trainer_id": trainer_id, "error_details": str(e)},
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trainer not found")
    except TableStorageException as e:
        raise _storage_error("Failed to discard trainer", e, trainer_id=trainer_id)

    return {
        "status": "success",
        "deleted_trainer": to_json_safe(trainer.to_public_dict()),
    }


# ==================== Listings ====================

@router.get("/listings")
async def get_listings(
    listing_service: ListingService = Depends(get_listing_service),
) -> dict:
    """Get every approved listing."""
    try:
        listings = await listing_service.get_approved_listings()
    except TableStorageException as e:
        raise _storage_error("Failed to retrieve listings", e)

    return {
        "status": "success",
        "listings": [to_json_safe(listing.to_dict()) for listing in listings],
    }


@router.get("/listings/pending")
async def get_pending_listings(
    listing_service: ListingService = Depends(get_listing_service),
) -> dict:
    """Get listings waiting for approval."""
    try:
        pending_listings = await listing_service.get_pending_listings()
    except TableStorageException as e:
        raise _storage_error("Failed to retrieve pending listings", e)

    logger.info("Pending listings retrieved", extra={"result_count": len(pending_listings)})
    return {
        "status": "success",
        "pending_listings": [to_json_safe(listing.to_dict()) for listing in pending_listings],
    }


@router.patch("/listings/{listing_id}/approve")
async def approve_pending_listing(
    listing_id: str,
    request: Optional[ApprovalRequest] = None,
    listing_service: ListingService = Depends(get_listing_service),
) -> dict:
    """Approve a listing and email the clients whose saved search it matches."""
    approver_name = (request.approver_name if request else None) or DEFAULT_USER_NAME

    logger.info(
        "Processing listing approval request",
        extra={"listing_id": listing_id, "approver_name": approver_name},
    )

    try:
        approval = await listing_service.approve_listing(listing_id, approver_name)
    except ListingNotFoundException as e:
        logger.warning(
            "Listing not found for approval",
            extra={"listing_id": listing_id, "error_details": str(e)},
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    except TableStorageException as e:
        raise _storage_error("Failed to approve listing", e, listing_id=listing_id)

    return {
        "message": "Listing approved successfully",
        "listing": to_json_safe(approval.listing.to_dict()),
        "notified": approval.notified,
    }


@router.delete("/listings/{listing_id}")
async def discard_pending_listing(
    listing_id: str,
    listing_service: ListingService = Depends(get_listing_service),
) -> dict:
    """Delete a listing."""
    try:
        listing = await listing_service.discard_listing(listing_id)
    except ListingNotFoundException as e:
        logger.warning(
            "Listing not found for discard",
            extra={"listing_id": listing_id, "error_details": str(e)},
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found")
    except TableStorageException as e:
        raise _storage_error("Failed to discard listing", e, listing_id=listing_id)

    return {
        "status": "success",
        "deleted_listing": to_json_safe(listing.to_dict()),
    }

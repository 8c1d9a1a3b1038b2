"""
Listing submission and the public catalogue of approved listings.
"""
import re
from datetime import date
from typing import Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field, field_validator

from marketplace_api.application.interfaces.di_container import get_listing_service
from marketplace_api.application.services.listing_service import ListingService
from shared.models.listing import Listing
from shared.utils.convert import to_json_safe
from shared.utils.exceptions import TableStorageException, ValidationException
from shared.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    responses={
        500: {"description": "Internal server error"},
    }
)

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class ListingRequestModel(BaseModel):
    """
    Add-listing form submitted by a trainer.

    The age group is one of the fixed labels; the stored listing carries the
    matching min/max ages so search alerts can be matched on overlap.
    """
    trainer_id: Optional[str] = Field(None, description="Trainer offering the listing")
    category: Literal["Basketball", "Table Tennis", "Yoga", "Other"]
    title: str = Field(..., min_length=3, description="Enter at least 3 characters")
    price: float = Field(..., ge=0, description="Price of the listing")
    location: str = Field(..., min_length=3, description="Address where the training takes place")
    quantity: Optional[int] = Field(None, ge=1, description="Number of seats")
    start_date: Optional[str] = Field(None, description="ISO date (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="ISO date (YYYY-MM-DD)")
    days: int = Field(..., ge=1, description="Number of training days")
    gender: Optional[Literal["Male", "Female", "Other"]] = None
    start_time: Optional[str] = Field(None, description="HH:MM")
    end_time: Optional[str] = Field(None, description="HH:MM")
    age_group: Optional[Literal["5-8", "8-12", "13-18", "18-21", "21+"]] = None
    description: str = Field(..., min_length=5, description="Describe the training")

    @field_validator("start_time", "end_time")
    def validate_time(cls, value):
        if value and not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM format")
        return value

    @field_validator("start_date", "end_date")
    def validate_date(cls, value):
        if value:
            try:
                date.fromisoformat(value)
            except ValueError:
                raise ValueError("Date must be in ISO format (YYYY-MM-DD)")
        return value

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "trainer_id": "3f9a1c2b7d4e",
                "category": "Yoga",
                "title": "Morning yoga for teens",
                "price": 25.0,
                "location": "Riverside Park, Pavilion 2",
                "quantity": 12,
                "start_date": "2026-11-02",
                "end_date": "2026-12-14",
                "days": 6,
                "gender": "Female",
                "start_time": "08:00",
                "end_time": "09:00",
                "age_group": "13-18",
                "description": "Gentle vinyasa flow, mats provided."
            }
        }
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
async def add_listing(
    request: ListingRequestModel,
    listing_service: ListingService = Depends(get_listing_service),
) -> dict:
    """Submit a listing for admin approval."""
    if request.start_date and request.end_date and request.end_date < request.start_date:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                            detail="end_date must not be before start_date")

    listing = Listing(listing_id="", **request.model_dump())
    try:
        listing = await listing_service.create_listing(listing)
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except TableStorageException as e:
        logger.error("Failed to create listing",
                     extra={"trainer_id": request.trainer_id, "error_details": str(e)},
                     exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create listing")

    return {"status": "success", "listing": to_json_safe(listing.to_dict())}


@router.get("/")
async def browse_listings(
    category: Optional[str] = Query(None),
    gender: Optional[str] = Query(None),
    listing_service: ListingService = Depends(get_listing_service),
) -> dict:
    """Approved listings, optionally narrowed by category and gender."""
    try:
        listings = await listing_service.get_approved_listings(category=category, gender=gender)
    except TableStorageException as e:
        logger.error("Failed to browse listings", extra={"error_details": str(e)}, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve listings")

    return {"listings": [to_json_safe(listing.to_dict()) for listing in listings]}

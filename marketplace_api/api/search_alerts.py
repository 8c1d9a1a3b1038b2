"""
Saved searches: clients get an email when a matching listing is approved.
"""
from typing import Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, Field, model_validator

from marketplace_api.application.interfaces.di_container import get_search_alert_service
from marketplace_api.application.services.search_alert_service import SearchAlertService
from shared.models.search_alert import SearchAlert
from shared.utils.convert import to_json_safe
from shared.utils.exceptions import TableStorageException, ValidationException
from shared.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


class SearchAlertRequestModel(BaseModel):
    email: EmailStr
    category: Optional[Literal["Basketball", "Table Tennis", "Yoga", "Other"]] = None
    gender: Optional[Literal["Male", "Female", "Other"]] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    min_age: Optional[int] = Field(None, ge=0, le=120)
    max_age: Optional[int] = Field(None, ge=0, le=120)

    @model_validator(mode="after")
    def validate_ranges(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        if self.min_age is not None and self.max_age is not None and self.min_age > self.max_age:
            raise ValueError("min_age must not exceed max_age")
        return self


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_search_alert(
    request: SearchAlertRequestModel,
    search_alert_service: SearchAlertService = Depends(get_search_alert_service),
) -> dict:
    alert = SearchAlert(alert_id="", **request.model_dump())
    try:
        alert = await search_alert_service.create_search_alert(alert)
    except ValidationException as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except TableStorageException as e:
        logger.error("Failed to save search alert", extra={"error_details": str(e)}, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save search alert")

    return {"status": "success", "search_alert": to_json_safe(alert.to_dict())}

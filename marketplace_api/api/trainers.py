"""
Trainer signup and the public list of approved trainers.
"""
import re
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from marketplace_api.application.interfaces.di_container import get_trainer_service
from marketplace_api.application.services.trainer_service import TrainerService
from shared.utils.exceptions import (
    DuplicateTrainerException,
    TableStorageException,
    TrainerNotFoundException,
)
from shared.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    responses={
        404: {"description": "Trainer not found"},
        500: {"description": "Internal server error"},
    }
)

PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[\W_]"), "Password must contain at least one special character"),
)


class SignUpRequest(BaseModel):
    """Trainer signup form."""

    email: EmailStr
    first_name: str = Field(..., min_length=1, description="First name is required")
    last_name: str = Field(..., min_length=1, description="Last name is required")
    phone: Optional[str] = Field(None, max_length=30)
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters long")
    confirm_password: str = Field(..., min_length=1, description="Please confirm your password")

    @field_validator("first_name", "last_name")
    def validate_name(cls, value):
        if not value.strip():
            raise ValueError("Name cannot be empty")
        return value.strip()

    @field_validator("password")
    def validate_password_strength(cls, value):
        for pattern, message in PASSWORD_RULES:
            if not pattern.search(value):
                raise ValueError(message)
        return value

    @model_validator(mode="after")
    def validate_passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "coach@example.com",
                "first_name": "Maya",
                "last_name": "Lopez",
                "phone": "+1 555 0100",
                "password": "Str0ng!pass",
                "confirm_password": "Str0ng!pass",
            }
        }
    )


class TrainerCard(BaseModel):
    """What the trainer card renders."""
    trainer_id: str
    fname: str
    lname: str
    email: str
    phone: Optional[str] = None


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignUpRequest,
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> dict:
    """Register a trainer. The account stays pending until an admin approves it."""
    try:
        trainer = await trainer_service.register_trainer(
            fname=request.first_name,
            lname=request.last_name,
            email=request.email,
            password=request.password,
            phone=request.phone,
        )
    except DuplicateTrainerException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except TableStorageException as e:
        logger.error("Trainer signup failed",
                     extra={"error_type": type(e).__name__, "error_details": str(e)},
                     exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Signup failed")

    return {"status": "success", "trainer": TrainerCard(**trainer.to_card()).model_dump()}


@router.get("/")
async def list_trainers(
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> dict:
    """Approved trainers, shaped for the trainer cards."""
    try:
        trainers = await trainer_service.get_approved_trainers()
    except TableStorageException as e:
        logger.error("Failed to list trainers", extra={"error_details": str(e)}, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve trainers")

    return {"trainers": [TrainerCard(**t.to_card()).model_dump() for t in trainers]}


@router.get("/{trainer_id}")
async def get_trainer(
    trainer_id: str,
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> dict:
    try:
        trainer = await trainer_service.get_approved_trainer(trainer_id)
    except TrainerNotFoundException:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trainer not found")
    except TableStorageException as e:
        logger.error("Failed to get trainer",
                     extra={"trainer_id": trainer_id, "error_details": str(e)}, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve trainer")

    return {"trainer": TrainerCard(**trainer.to_card()).model_dump()}

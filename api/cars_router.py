"""
Car record API routes for SML Cars Backend.
"""

from typing import Dict, Any
from fastapi import APIRouter, Depends
from models.auth import ErrorResponse
from models.car_model import (
    CarCreateRequest,
    CarUpdateRequest,
    CarResponse,
    CarListResponse,
    MessageResponse
)
from services.car_service import CarService
from core.dependencies import get_current_admin
from core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api/cars", tags=["cars"])

AUTH_RESPONSES = {401: {"model": ErrorResponse, "description": "Unauthorized - Invalid or missing token"}}


def get_car_service() -> CarService:
    """Dependency to get car service instance."""
    return CarService()


@router.get(
    "",
    response_model=CarListResponse,
    responses={500: {"model": ErrorResponse, "description": "Document store unavailable"}},
    summary="List Cars",
    description="List cars, newest first, capped at the configured page size."
)
async def list_cars(car_service: CarService = Depends(get_car_service)):
    cars, total = car_service.list_cars()
    logger.info(f"Retrieved {len(cars)} of {total} cars")
    return CarListResponse(data=cars, total=total)


@router.get(
    "/{car_id}",
    response_model=CarResponse,
    responses={404: {"model": ErrorResponse, "description": "Car not found"}},
    summary="Get Car"
)
async def get_car(car_id: str, car_service: CarService = Depends(get_car_service)):
    return CarResponse(data=car_service.get_car(car_id))


@router.post(
    "",
    response_model=CarResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing required fields"},
        **AUTH_RESPONSES
    },
    summary="Create Car",
    description="Create a car; optional fields take dealership defaults."
)
async def create_car(
    request: CarCreateRequest,
    current_user: Dict[str, Any] = Depends(get_current_admin),
    car_service: CarService = Depends(get_car_service)
):
    """
    Create a car record.

    - **brand**, **model**, **year**, **price**, **fuelType** are required
    - unknown fields are ignored
    """
    car = car_service.create_car(request.to_document())
    logger.info(f"Car created: {car.get('id')}")
    return CarResponse(data=car)


@router.put(
    "/{car_id}",
    response_model=CarResponse,
    responses={
        400: {"model": ErrorResponse, "description": "No updatable fields"},
        404: {"model": ErrorResponse, "description": "Car not found"},
        **AUTH_RESPONSES
    },
    summary="Update Car",
    description="Partially update a car; only supplied fields change."
)
async def update_car(
    car_id: str,
    request: CarUpdateRequest,
    current_user: Dict[str, Any] = Depends(get_current_admin),
    car_service: CarService = Depends(get_car_service)
):
    car = car_service.update_car(car_id, request.to_document())
    return CarResponse(data=car)


@router.delete(
    "/{car_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse, "description": "Car not found"}, **AUTH_RESPONSES},
    summary="Delete Car"
)
async def delete_car(
    car_id: str,
    current_user: Dict[str, Any] = Depends(get_current_admin),
    car_service: CarService = Depends(get_car_service)
):
    car_service.delete_car(car_id)
    return MessageResponse(message="Car deleted")

"""
Car record service for SML Cars Backend.

Persistence, id assignment and ``created_at`` are owned by the Supabase
table; this service only forwards already-coerced documents.
"""

from typing import Any, Dict, List, Tuple
from postgrest.exceptions import APIError
from services.base import BaseService
from core.exceptions import (
    DatabaseException,
    ResourceNotFoundException,
    ValidationException
)

# Postgres rejects ids that do not parse as the column type
INVALID_TEXT_REPRESENTATION = "22P02"


class CarService(BaseService):
    """CRUD operations on the cars table."""

    @property
    def table(self):
        return self.db.table(self.settings.cars_table)

    def _not_found_or_raise(self, e: Exception, car_id: str, operation: str):
        if isinstance(e, APIError) and e.code == INVALID_TEXT_REPRESENTATION:
            raise ResourceNotFoundException("Car", car_id) from e
        self.logger.error(f"Failed to {operation} car {car_id}: {e}")
        raise DatabaseException(f"Failed to {operation} car", operation=operation) from e

    def list_cars(self) -> Tuple[List[Dict[str, Any]], int]:
        """
        List cars, newest first.

        Returns:
            Tuple of (documents, total number of cars in the table)
        """
        try:
            result = (
                self.table.select("*", count="exact")
                .order("created_at", desc=True)
                .limit(self.settings.cars_page_size)
                .execute()
            )
            cars = result.data or []
            total = result.count if result.count is not None else len(cars)
            return cars, total

        except Exception as e:
            self.logger.error(f"Failed to list cars: {e}")
            raise DatabaseException("Failed to list cars", operation="list") from e

    def get_car(self, car_id: str) -> Dict[str, Any]:
        """
        Fetch one car.

        Raises:
            ResourceNotFoundException: If no car has this id
        """
        try:
            result = self.table.select("*").eq("id", car_id).limit(1).execute()
        except Exception as e:
            self._not_found_or_raise(e, car_id, "get")

        if not result.data:
            raise ResourceNotFoundException("Car", car_id)
        return result.data[0]

    def create_car(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a coerced car document and return the stored row."""
        self.logger.info(f"Creating car with data: {document}")
        try:
            result = self.table.insert(document).execute()
        except Exception as e:
            self.logger.error(f"Create car error: {e}")
            raise DatabaseException("Failed to create car", operation="create") from e

        if not result.data:
            raise DatabaseException("Car was not stored", operation="create")
        return result.data[0]

    def update_car(self, car_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update; fields not in ``updates`` keep their values.

        Raises:
            ValidationException: If ``updates`` is empty
            ResourceNotFoundException: If no car has this id
        """
        if not updates:
            raise ValidationException("No updatable fields supplied")

        self.logger.info(f"Updating car {car_id} with data: {updates}")
        try:
            result = self.table.update(updates).eq("id", car_id).execute()
        except Exception as e:
            self._not_found_or_raise(e, car_id, "update")

        if not result.data:
            raise ResourceNotFoundException("Car", car_id)
        return result.data[0]

    def delete_car(self, car_id: str) -> None:
        """
        Delete a car. Its images stay in storage.

        Raises:
            ResourceNotFoundException: If no car has this id
        """
        try:
            result = self.table.delete().eq("id", car_id).execute()
        except Exception as e:
            self._not_found_or_raise(e, car_id, "delete")

        if not result.data:
            raise ResourceNotFoundException("Car", car_id)
        self.logger.info(f"Car deleted: {car_id}")

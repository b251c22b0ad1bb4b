"""
Errors raised by the gatehouse core.

Storage and migration failures are NOT wrapped: SQLAlchemy / sqlite errors
reach the caller unchanged. The classes here cover misuse of the store and
lookups made by the service layer.
"""
from __future__ import annotations


class GatehouseError(Exception):
    """Base class for errors raised by this package."""


class StoreNotInitializedError(GatehouseError):
    def __init__(self, message: str = "Database not initialized"):
        super().__init__(message)


class TransactionStateError(GatehouseError):
    """begin() while a transaction is open, or commit()/rollback() without one."""


class EntityNotFoundError(GatehouseError):
    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} {entity_id} not found")


class EmergencyAlreadyDeactivatedError(GatehouseError):
    def __init__(self, log_id: str):
        self.log_id = log_id
        super().__init__(f"Emergency {log_id} has already been deactivated")


class InvalidTransitionError(GatehouseError):
    """A lifecycle change that the entity's current state does not allow."""

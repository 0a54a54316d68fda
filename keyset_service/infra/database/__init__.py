"""Store adapters implementing the pagination query executor."""

from keyset_service.infra.database.mongo import MotorQueryExecutor, create_motor_client

__all__ = ["MotorQueryExecutor", "create_motor_client"]

"""
Employee Storage

Read-only PostgreSQL access to employees (owned by the identity subsystem).
"""
import logging
from typing import Iterable, List, Optional
from uuid import UUID

from .base import BaseStorage
from ..models.employee import Employee, EmployeeRole

logger = logging.getLogger("dashchat.storage.employee")


class EmployeeStorage(BaseStorage):
    """Storage for Employee lookups"""

    async def get_by_id(self, employee_id: UUID) -> Optional[Employee]:
        """Get employee by ID"""
        query = "SELECT id, name, email, role, created_at FROM employees WHERE id = $1"
        row = await self.fetchrow(query, employee_id)
        return self._row_to_employee(row) if row else None

    async def get_many(self, employee_ids: Iterable[UUID]) -> List[Employee]:
        """Get employees by IDs; unknown IDs are skipped"""
        ids = list(set(employee_ids))
        if not ids:
            return []
        query = """
            SELECT id, name, email, role, created_at FROM employees
            WHERE id = ANY($1::uuid[])
        """
        rows = await self.fetch(query, ids)
        return [self._row_to_employee(row) for row in rows]

    def _row_to_employee(self, row) -> Employee:
        """Convert database row to Employee"""
        try:
            role = EmployeeRole(row["role"])
        except ValueError:
            role = EmployeeRole.EMPLOYEE
        return Employee(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            role=role,
            created_at=row["created_at"],
        )

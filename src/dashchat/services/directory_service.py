"""
Directory Service

Resolves employee ids to display-safe projections.
"""
import logging
from typing import Dict, Iterable, Optional
from uuid import UUID

from ..models.employee import Employee, EmployeeSummary
from ..storage.employee_storage import EmployeeStorage

logger = logging.getLogger("dashchat.services.directory")


class DirectoryService:
    """Employee lookups for the chat core"""

    def __init__(self, employee_storage: EmployeeStorage):
        self.employee_storage = employee_storage

    async def get_employee(self, employee_id: UUID) -> Optional[Employee]:
        """Get employee by ID"""
        return await self.employee_storage.get_by_id(employee_id)

    async def summaries(self, employee_ids: Iterable[UUID]) -> Dict[UUID, EmployeeSummary]:
        """
        Map ids to projections in one storage round trip.

        Unknown ids map to a projection with only the id set.
        """
        ids = [i for i in employee_ids if i is not None]
        found = {e.id: e.summary() for e in await self.employee_storage.get_many(ids)}
        missing = [i for i in ids if i not in found]
        if missing:
            logger.debug(f"Unknown employees referenced: {missing}")
        for employee_id in missing:
            found[employee_id] = EmployeeSummary(id=employee_id)
        return found

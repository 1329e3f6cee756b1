from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from studio.models.attendance import AttendanceStatus


class AttendanceRecordIn(BaseModel):
    customer_id: int
    group_id: int
    date: date
    status: AttendanceStatus


class AttendanceUpdate(BaseModel):
    """Можно передать status или, для старых клиентов, is_present."""
    status: Optional[AttendanceStatus] = None
    is_present: Optional[bool] = None

    @model_validator(mode="after")
    def check_one_field(self):
        if self.status is None and self.is_present is None:
            raise ValueError("Нужно указать status или is_present")
        return self

    def resolved_status(self) -> AttendanceStatus:
        if self.status is not None:
            return self.status
        return AttendanceStatus.PRESENT if self.is_present else AttendanceStatus.ABSENT


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    group_id: int
    date: date
    status: AttendanceStatus
    is_present: bool
    customer_name: Optional[str] = None
    group_name: Optional[str] = None


class AttendanceBatchError(BaseModel):
    index: int
    customer_id: int
    group_id: int
    date: date
    error: str


class AttendanceBatchResponse(BaseModel):
    saved: List[AttendanceResponse]
    created: int
    updated: int
    errors: List[AttendanceBatchError]

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from studio.database import get_db
from studio.models.attendance import Attendance, AttendanceStatus
from studio.schemas.attendance import (
    AttendanceBatchResponse,
    AttendanceRecordIn,
    AttendanceResponse,
    AttendanceUpdate,
)
from studio.schemas.auth import AdminClaims
from studio.services import attendance_service
from studio.utils.auth_utils import require_admin
from studio.utils.error_utils import handle_not_found_error, handle_validation_error
from studio.utils.validations import ValidationError

router = APIRouter()


def attendance_payload(attendance: Attendance) -> dict:
    """Отметка вместе с именем клиента и названием группы."""
    return {
        "id": attendance.id,
        "customer_id": attendance.customer_id,
        "group_id": attendance.group_id,
        "date": attendance.date,
        "status": attendance.status,
        "is_present": attendance.is_present,
        "customer_name": attendance.customer.full_name if attendance.customer else None,
        "group_name": attendance.group.name if attendance.group else None,
    }


@router.get("/attendances", response_model=List[AttendanceResponse], tags=["attendances"])
async def get_attendances(
    group_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    status: Optional[AttendanceStatus] = None,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Журнал посещаемости с фильтрами по группе, клиенту, месяцу и периоду."""
    try:
        attendances = attendance_service.list_attendances(
            db,
            group_id=group_id,
            customer_id=customer_id,
            month=month,
            year=year,
            date_from=date_from,
            date_to=date_to,
            status=status,
        )
    except ValidationError as e:
        raise handle_validation_error(e)

    return [attendance_payload(attendance) for attendance in attendances]


@router.post("/attendances", response_model=AttendanceBatchResponse, tags=["attendances"])
async def create_attendances(
    records: List[AttendanceRecordIn],
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """
    Отметки за занятие пакетом. Существующая отметка на тот же день обновляется.
    Ответ может содержать и сохраненные отметки, и ошибки.
    """
    result = attendance_service.save_attendance_batch(db, records)
    return {
        **result,
        "saved": [attendance_payload(attendance) for attendance in result["saved"]],
    }


@router.get("/attendances/{attendance_id}", response_model=AttendanceResponse, tags=["attendances"])
async def get_attendance(
    attendance_id: int,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    attendance = attendance_service.get_attendance(db, attendance_id)
    if not attendance:
        raise handle_not_found_error("Отметка", attendance_id)
    return attendance_payload(attendance)


@router.patch("/attendances/{attendance_id}", response_model=AttendanceResponse, tags=["attendances"])
async def update_attendance(
    attendance_id: int,
    data: AttendanceUpdate,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Исправление отметки. is_present принимается для совместимости и переводится в status."""
    attendance = attendance_service.get_attendance(db, attendance_id)
    if not attendance:
        raise handle_not_found_error("Отметка", attendance_id)

    attendance = attendance_service.update_attendance(db, attendance, data.resolved_status())
    return attendance_payload(attendance)

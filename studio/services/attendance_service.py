import logging
from calendar import monthrange
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.sql import func

from studio.models.attendance import Attendance, AttendanceStatus
from studio.models.customer import Customer
from studio.models.group import Group
from studio.schemas.attendance import AttendanceRecordIn
from studio.utils.validations import ValidationError

logger = logging.getLogger(__name__)

NATURAL_KEY = ["customer_id", "group_id", "date"]

# Диалекты с атомарным INSERT ... ON CONFLICT DO UPDATE
UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class InvalidPeriodError(ValidationError):
    pass


def get_attendance(db: Session, attendance_id: int) -> Optional[Attendance]:
    return db.query(Attendance).options(
        joinedload(Attendance.customer),
        joinedload(Attendance.group)
    ).filter(Attendance.id == attendance_id).first()


def month_bounds(year: int, month: int) -> tuple:
    """Первый и последний день месяца."""
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Неверный месяц: {month}")
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def list_attendances(
        db: Session,
        group_id: Optional[int] = None,
        customer_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        status: Optional[AttendanceStatus] = None
) -> List[Attendance]:
    """
    Отметки посещаемости с фильтрами, новые сверху.

    Args:
        db: сессия БД
        group_id: только эта группа
        customer_id: только этот клиент
        month, year: только этот месяц (указываются вместе)
        date_from, date_to: границы периода включительно
        status: только этот статус

    Returns:
        List[Attendance]: отметки с подгруженными клиентом и группой
    """
    if (month is None) != (year is None):
        raise InvalidPeriodError("Месяц и год указываются вместе")
    if date_from and date_to and date_from > date_to:
        raise InvalidPeriodError("Начало периода позже его конца")

    query = db.query(Attendance).options(
        joinedload(Attendance.customer),
        joinedload(Attendance.group)
    )

    if group_id is not None:
        query = query.filter(Attendance.group_id == group_id)
    if customer_id is not None:
        query = query.filter(Attendance.customer_id == customer_id)
    if month is not None:
        first_day, last_day = month_bounds(year, month)
        query = query.filter(Attendance.date >= first_day, Attendance.date <= last_day)
    if date_from is not None:
        query = query.filter(Attendance.date >= date_from)
    if date_to is not None:
        query = query.filter(Attendance.date <= date_to)
    if status is not None:
        query = query.filter(Attendance.status == status)

    return query.order_by(Attendance.date.desc(), Attendance.id).all()


def update_attendance(db: Session, attendance: Attendance, status: AttendanceStatus) -> Attendance:
    attendance.status = status
    db.commit()
    db.refresh(attendance)

    logger.info(f"Отметка {attendance.id} изменена: {status.value}")
    return attendance


def _find_by_natural_key(db: Session, record: AttendanceRecordIn) -> Optional[Attendance]:
    return db.query(Attendance).filter(
        Attendance.customer_id == record.customer_id,
        Attendance.group_id == record.group_id,
        Attendance.date == record.date
    ).first()


def upsert_attendance(db: Session, record: AttendanceRecordIn) -> Dict[str, Any]:
    """
    Создает отметку или обновляет существующую по ключу (клиент, группа, дата).
    Коммит выполняет вызывающий код.

    Returns:
        Dict: {"attendance": Attendance, "created": bool}
    """
    existing = _find_by_natural_key(db, record)
    insert = UPSERT_DIALECTS.get(db.get_bind().dialect.name)

    if insert is not None:
        stmt = insert(Attendance).values(
            customer_id=record.customer_id,
            group_id=record.group_id,
            date=record.date,
            status=record.status,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=NATURAL_KEY,
            set_={"status": stmt.excluded.status, "updated_at": func.now()},
        )
        db.execute(stmt)
        attendance = _find_by_natural_key(db, record)
        if existing is not None:
            db.refresh(attendance)
    elif existing is not None:
        existing.status = record.status
        existing.updated_at = datetime.now()
        attendance = existing
    else:
        attendance = Attendance(
            customer_id=record.customer_id,
            group_id=record.group_id,
            date=record.date,
            status=record.status,
        )
        db.add(attendance)
        db.flush()

    return {"attendance": attendance, "created": existing is None}


def save_attendance_batch(db: Session, records: List[AttendanceRecordIn]) -> Dict[str, Any]:
    """
    Сохраняет пакет отметок за занятие.

    Каждая отметка сохраняется отдельно: ошибка в одной не откатывает остальные
    и попадает в список errors.

    Args:
        db: сессия БД
        records: отметки (клиент, группа, дата, статус)

    Returns:
        Dict: saved, created, updated, errors
    """
    customer_ids = {record.customer_id for record in records}
    group_ids = {record.group_id for record in records}
    known_customers = {row[0] for row in db.query(Customer.id).filter(Customer.id.in_(customer_ids))} if customer_ids else set()
    known_groups = {row[0] for row in db.query(Group.id).filter(Group.id.in_(group_ids))} if group_ids else set()

    saved = []
    errors = []
    created_count = 0
    updated_count = 0

    for index, record in enumerate(records):
        error = None
        if record.customer_id not in known_customers:
            error = f"Клиент (id: {record.customer_id}) не найден"
        elif record.group_id not in known_groups:
            error = f"Группа (id: {record.group_id}) не найдена"

        if error is None:
            try:
                result = upsert_attendance(db, record)
                db.commit()
            except SQLAlchemyError as e:
                logger.error(f"Ошибка сохранения отметки #{index}: {e}", exc_info=True)
                db.rollback()
                error = "Не удалось сохранить отметку"
            else:
                saved.append(result["attendance"].id)
                if result["created"]:
                    created_count += 1
                else:
                    updated_count += 1

        if error is not None:
            logger.warning(f"Отметка #{index} пропущена: {error}")
            errors.append({
                "index": index,
                "customer_id": record.customer_id,
                "group_id": record.group_id,
                "date": record.date,
                "error": error,
            })

    attendances = []
    if saved:
        by_id = {
            attendance.id: attendance
            for attendance in db.query(Attendance).options(
                joinedload(Attendance.customer),
                joinedload(Attendance.group)
            ).filter(Attendance.id.in_(saved))
        }
        attendances = [by_id[attendance_id] for attendance_id in saved]

    logger.info(
        f"Пакет отметок: {len(records)} всего, создано {created_count}, "
        f"обновлено {updated_count}, ошибок {len(errors)}"
    )

    return {
        "saved": attendances,
        "created": created_count,
        "updated": updated_count,
        "errors": errors,
    }

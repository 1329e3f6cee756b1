import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from studio.models.attendance import Attendance
from studio.models.customer import Customer
from studio.models.group import Group
from studio.schemas.group import GroupBase
from studio.utils.validations import ValidationError, validate_time_range, validate_weekdays

logger = logging.getLogger(__name__)


class GroupInUseError(ValidationError):
    pass


def validate_group(data: GroupBase) -> Optional[ValidationError]:
    """Проверки расписания перед любой записью."""
    return validate_weekdays(data.weekdays) or validate_time_range(data.start_time, data.end_time)


def _normalize_weekdays(weekdays: str) -> str:
    return ",".join(day.strip() for day in weekdays.split(",") if day.strip()) if weekdays else ""


def get_group(db: Session, group_id: int) -> Optional[Group]:
    return db.query(Group).options(selectinload(Group.customers)).filter(Group.id == group_id).first()


def list_groups(db: Session) -> List[tuple]:
    """
    Returns:
        List[tuple]: пары (Group, число клиентов)
    """
    counts = dict(
        db.query(Customer.group_id, func.count(Customer.id))
        .filter(Customer.group_id.isnot(None))
        .group_by(Customer.group_id)
        .all()
    )
    groups = db.query(Group).order_by(Group.name).all()
    return [(group, counts.get(group.id, 0)) for group in groups]


def create_group(db: Session, data: GroupBase) -> Group:
    error = validate_group(data)
    if error:
        raise error

    values = data.model_dump()
    values["weekdays"] = _normalize_weekdays(data.weekdays)
    group = Group(**values)
    db.add(group)
    db.commit()
    db.refresh(group)

    logger.info(f"Создана группа {group.id}: {group.name}")
    return group


def update_group(db: Session, group: Group, data: GroupBase) -> Group:
    error = validate_group(data)
    if error:
        raise error

    for field, value in data.model_dump().items():
        setattr(group, field, value)
    group.weekdays = _normalize_weekdays(data.weekdays)

    db.commit()
    db.refresh(group)

    logger.info(f"Группа {group.id} обновлена")
    return group


def delete_group(db: Session, group: Group) -> Group:
    """
    Клиенты группы остаются без группы.
    Группу с отметками посещаемости удалить нельзя.
    """
    has_attendance = db.query(Attendance.id).filter(Attendance.group_id == group.id).first()
    if has_attendance:
        raise GroupInUseError("Нельзя удалить группу, по которой есть отметки посещаемости")

    db.query(Customer).filter(Customer.group_id == group.id).update(
        {Customer.group_id: None}, synchronize_session=False
    )
    db.delete(group)
    db.commit()

    logger.info(f"Группа {group.id} удалена")
    return group

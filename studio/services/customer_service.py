import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from studio.models.attendance import Attendance
from studio.models.customer import Customer
from studio.models.group import Group
from studio.schemas.customer import CustomerCreate, CustomerUpdate
from studio.utils.validations import ValidationError

logger = logging.getLogger(__name__)


class CustomerInUseError(ValidationError):
    pass


class UnknownGroupError(ValidationError):
    pass


def get_customer(db: Session, customer_id: int) -> Optional[Customer]:
    return db.query(Customer).options(joinedload(Customer.group)).filter(Customer.id == customer_id).first()


def list_customers(db: Session, group_id: Optional[int] = None) -> List[Customer]:
    query = db.query(Customer).options(joinedload(Customer.group))
    if group_id is not None:
        query = query.filter(Customer.group_id == group_id)
    return query.order_by(Customer.last_name, Customer.first_name).all()


def _check_group(db: Session, group_id: Optional[int]) -> None:
    if group_id is not None and db.get(Group, group_id) is None:
        raise UnknownGroupError(f"Группа (id: {group_id}) не существует")


def create_customer(db: Session, data: CustomerCreate) -> Customer:
    """Новый клиент; дата последней оплаты равна моменту создания."""
    _check_group(db, data.group_id)

    customer = Customer(**data.model_dump())
    db.add(customer)
    db.commit()
    db.refresh(customer)

    logger.info(f"Создан клиент {customer.id}: {customer.full_name}")
    return customer


def update_customer(db: Session, customer: Customer, data: CustomerUpdate) -> Customer:
    _check_group(db, data.group_id)

    for field, value in data.model_dump().items():
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)

    logger.info(f"Клиент {customer.id} обновлен")
    return customer


def delete_customer(db: Session, customer: Customer) -> Customer:
    """Клиента с отметками посещаемости удалить нельзя."""
    has_attendance = db.query(Attendance.id).filter(Attendance.customer_id == customer.id).first()
    if has_attendance:
        raise CustomerInUseError("Нельзя удалить клиента, у которого есть отметки посещаемости")

    db.delete(customer)
    db.commit()

    logger.info(f"Клиент {customer.id} удален")
    return customer

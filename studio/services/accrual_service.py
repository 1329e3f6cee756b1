import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from studio.config import config
from studio.models.attendance import Attendance, AttendanceStatus
from studio.models.customer import Customer

logger = logging.getLogger(__name__)

DEFAULT_OVERDUE_THRESHOLD = 7


@dataclass(frozen=True)
class AccrualResult:
    customer_id: int
    attendance_count: int
    is_overdue: bool


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def in_accrual_window(attendance_date: date, last_payment_date: datetime, as_of: datetime) -> bool:
    """
    Попадает ли день занятия в окно [last_payment_date, as_of].

    День сравнивается по его началу (полночь), поэтому занятие в день оплаты,
    но до момента оплаты, в окно не попадает.
    """
    day = _day_start(attendance_date)
    return last_payment_date <= day <= as_of


def count_attendance_since_payment(
        attendances: Iterable[Attendance],
        last_payment_date: datetime,
        as_of: datetime
) -> int:
    """
    Считает посещения с момента последней оплаты.

    Args:
        attendances: отметки посещаемости клиента (любые, фильтрация здесь)
        last_payment_date: момент последней оплаты
        as_of: верхняя граница окна

    Returns:
        int: число отметок PRESENT внутри окна
    """
    return sum(
        1 for attendance in attendances
        if attendance.status == AttendanceStatus.PRESENT
        and in_accrual_window(attendance.date, last_payment_date, as_of)
    )


def is_overdue(attendance_count: int, threshold: Optional[int] = None) -> bool:
    if threshold is None:
        threshold = get_overdue_threshold()
    return attendance_count >= threshold


def get_overdue_threshold() -> int:
    return config.billing.overdue_threshold or DEFAULT_OVERDUE_THRESHOLD


def get_customer_accrual(
        db: Session,
        customer: Customer,
        as_of: Optional[datetime] = None,
        threshold: Optional[int] = None
) -> AccrualResult:
    """Расчет для одного клиента (страница клиента)."""
    as_of = as_of or datetime.now()

    attendances = db.query(Attendance).filter(
        Attendance.customer_id == customer.id,
        Attendance.status == AttendanceStatus.PRESENT,
        Attendance.date >= customer.last_payment_date.date(),
        Attendance.date <= as_of.date()
    ).all()

    count = count_attendance_since_payment(attendances, customer.last_payment_date, as_of)
    return AccrualResult(
        customer_id=customer.id,
        attendance_count=count,
        is_overdue=is_overdue(count, threshold),
    )


def get_all_accruals(
        db: Session,
        customers: List[Customer],
        as_of: Optional[datetime] = None,
        threshold: Optional[int] = None
) -> Dict[int, AccrualResult]:
    """
    Расчет сразу для многих клиентов: одна выборка посещений вместо запроса на каждого клиента.
    Результат для каждого клиента совпадает с get_customer_accrual.
    """
    as_of = as_of or datetime.now()
    if not customers:
        return {}

    query = db.query(Attendance).filter(
        Attendance.status == AttendanceStatus.PRESENT,
        Attendance.date <= as_of.date()
    )
    # Нижнюю границу окна сужаем по самой ранней оплате
    earliest_payment = min(customer.last_payment_date for customer in customers)
    query = query.filter(Attendance.date >= earliest_payment.date())

    by_customer = defaultdict(list)
    for attendance in query.all():
        by_customer[attendance.customer_id].append(attendance)

    results = {}
    for customer in customers:
        count = count_attendance_since_payment(
            by_customer.get(customer.id, []), customer.last_payment_date, as_of
        )
        results[customer.id] = AccrualResult(
            customer_id=customer.id,
            attendance_count=count,
            is_overdue=is_overdue(count, threshold),
        )
    return results


def get_overdue_customers(
        db: Session,
        as_of: Optional[datetime] = None,
        threshold: Optional[int] = None
) -> List[tuple]:
    """
    Клиенты, которым пора платить.

    Returns:
        List[tuple]: пары (Customer, attendance_count), отсортированные по убыванию числа посещений
    """
    customers = db.query(Customer).options(joinedload(Customer.group)).order_by(Customer.id).all()
    accruals = get_all_accruals(db, customers, as_of, threshold)

    overdue = [
        (customer, accruals[customer.id].attendance_count)
        for customer in customers
        if accruals[customer.id].is_overdue
    ]
    overdue.sort(key=lambda item: item[1], reverse=True)

    logger.info(f"Должников: {len(overdue)} из {len(customers)}")
    return overdue


def record_payment(db: Session, customer: Customer, paid_at: Optional[datetime] = None) -> Customer:
    """
    Фиксирует оплату: сдвигает начало окна подсчета.
    Отметки посещаемости не удаляются и не изменяются.
    """
    paid_at = paid_at or datetime.now()
    if paid_at < customer.last_payment_date:
        logger.warning(
            f"Дата оплаты {paid_at.isoformat()} раньше предыдущей "
            f"{customer.last_payment_date.isoformat()} (клиент {customer.id}), оставляем прежнюю"
        )
        return customer

    customer.last_payment_date = paid_at
    db.commit()
    db.refresh(customer)

    logger.info(f"Оплата клиента {customer.id} зафиксирована: {paid_at.isoformat()}")
    return customer

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studio.database import get_db
from studio.models.customer import Customer
from studio.schemas.auth import AdminClaims
from studio.schemas.customer import (
    CustomerCreate,
    CustomerDetailResponse,
    CustomerResponse,
    CustomerUpdate,
    OverdueCustomerResponse,
)
from studio.services import accrual_service, customer_service
from studio.utils.auth_utils import require_admin
from studio.utils.error_utils import handle_not_found_error, handle_validation_error
from studio.utils.validations import ValidationError, calculate_age

logger = logging.getLogger(__name__)

router = APIRouter()


def customer_payload(customer: Customer) -> dict:
    """Поля клиента для ответа, включая возраст строкой."""
    return {
        "id": customer.id,
        "first_name": customer.first_name,
        "last_name": customer.last_name,
        "phone_number": customer.phone_number,
        "email": customer.email,
        "date_of_birth": customer.date_of_birth,
        "group_id": customer.group_id,
        "group": {"id": customer.group.id, "name": customer.group.name} if customer.group else None,
        "last_payment_date": customer.last_payment_date,
        "age": calculate_age(customer.date_of_birth),
    }


def customer_detail_payload(db: Session, customer: Customer, as_of: Optional[datetime] = None) -> dict:
    accrual = accrual_service.get_customer_accrual(db, customer, as_of)
    return {
        **customer_payload(customer),
        "attendance_count": accrual.attendance_count,
        "is_overdue": accrual.is_overdue,
    }


def _get_customer_or_404(db: Session, customer_id: int) -> Customer:
    customer = customer_service.get_customer(db, customer_id)
    if not customer:
        raise handle_not_found_error("Клиент", customer_id)
    return customer


@router.get("/customers", response_model=List[CustomerResponse], tags=["customers"])
async def get_customers(
    group_id: Optional[int] = None,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Список клиентов с возрастом."""
    customers = customer_service.list_customers(db, group_id=group_id)
    return [customer_payload(customer) for customer in customers]


@router.post("/customers", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED, tags=["customers"])
async def create_customer(
    data: CustomerCreate,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Новый клиент."""
    try:
        customer = customer_service.create_customer(db, data)
    except ValidationError as e:
        raise handle_validation_error(e, field="group_id")

    return customer_payload(customer_service.get_customer(db, customer.id))


@router.get("/customers/overdue", response_model=List[OverdueCustomerResponse], tags=["customers"])
async def get_overdue_customers(
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Клиенты, посетившие с последней оплаты не меньше порогового числа занятий."""
    overdue = accrual_service.get_overdue_customers(db, as_of=datetime.now())
    return [
        {**customer_payload(customer), "attendance_count": attendance_count}
        for customer, attendance_count in overdue
    ]


@router.get("/customers/{customer_id}", response_model=CustomerDetailResponse, tags=["customers"])
async def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Клиент с числом посещений с последней оплаты."""
    customer = _get_customer_or_404(db, customer_id)
    return customer_detail_payload(db, customer, as_of=datetime.now())


@router.put("/customers/{customer_id}", response_model=CustomerResponse, tags=["customers"])
async def update_customer(
    customer_id: int,
    data: CustomerUpdate,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Изменение данных клиента."""
    customer = _get_customer_or_404(db, customer_id)
    try:
        customer = customer_service.update_customer(db, customer, data)
    except ValidationError as e:
        raise handle_validation_error(e, field="group_id")

    return customer_payload(customer)


@router.patch("/customers/{customer_id}", response_model=CustomerDetailResponse, tags=["customers"])
async def record_payment(
    customer_id: int,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Фиксирует оплату: счетчик посещений начинается заново."""
    customer = _get_customer_or_404(db, customer_id)
    now = datetime.now()
    customer = accrual_service.record_payment(db, customer, paid_at=now)
    logger.info(f"{admin.username} отметил оплату клиента {customer_id}")
    return customer_detail_payload(db, customer, as_of=now)


@router.delete("/customers/{customer_id}", response_model=CustomerResponse, tags=["customers"])
async def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Удаление клиента."""
    customer = _get_customer_or_404(db, customer_id)
    payload = customer_payload(customer)
    try:
        customer_service.delete_customer(db, customer)
    except ValidationError as e:
        raise handle_validation_error(e)

    return payload

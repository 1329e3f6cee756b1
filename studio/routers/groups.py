from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studio.database import get_db
from studio.models.group import Group
from studio.schemas.auth import AdminClaims
from studio.schemas.group import GroupCreate, GroupDetailResponse, GroupResponse, GroupUpdate
from studio.services import group_service
from studio.utils.auth_utils import require_admin
from studio.utils.error_utils import handle_not_found_error, handle_validation_error
from studio.utils.validations import ValidationError

router = APIRouter()


def group_payload(group: Group, customer_count: int = 0) -> dict:
    return {
        "id": group.id,
        "name": group.name,
        "description": group.description,
        "weekdays": group.weekdays,
        "start_time": group.start_time,
        "end_time": group.end_time,
        "price": group.price,
        "is_permanent": group.is_permanent,
        "customer_count": customer_count,
    }


def group_detail_payload(group: Group) -> dict:
    return {
        **group_payload(group, len(group.customers)),
        "customers": [
            {
                "id": customer.id,
                "first_name": customer.first_name,
                "last_name": customer.last_name,
                "phone_number": customer.phone_number,
            }
            for customer in group.customers
        ],
    }


def _get_group_or_404(db: Session, group_id: int) -> Group:
    group = group_service.get_group(db, group_id)
    if not group:
        raise handle_not_found_error("Группа", group_id)
    return group


# Просмотр групп доступен без входа
@router.get("/groups", response_model=List[GroupResponse], tags=["groups"])
async def get_groups(db: Session = Depends(get_db)):
    """Список групп с числом клиентов."""
    return [group_payload(group, count) for group, count in group_service.list_groups(db)]


@router.get("/groups/{group_id}", response_model=GroupDetailResponse, tags=["groups"])
async def get_group(group_id: int, db: Session = Depends(get_db)):
    """Группа и ее клиенты."""
    return group_detail_payload(_get_group_or_404(db, group_id))


@router.post("/groups", response_model=GroupResponse, status_code=status.HTTP_201_CREATED, tags=["groups"])
async def create_group(
    data: GroupCreate,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Новая группа. Расписание проверяется до записи."""
    try:
        group = group_service.create_group(db, data)
    except ValidationError as e:
        raise handle_validation_error(e)

    return group_payload(group)


@router.put("/groups/{group_id}", response_model=GroupDetailResponse, tags=["groups"])
async def update_group(
    group_id: int,
    data: GroupUpdate,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    group = _get_group_or_404(db, group_id)
    try:
        group = group_service.update_group(db, group, data)
    except ValidationError as e:
        raise handle_validation_error(e)

    return group_detail_payload(group)


@router.delete("/groups/{group_id}", response_model=GroupResponse, tags=["groups"])
async def delete_group(
    group_id: int,
    db: Session = Depends(get_db),
    admin: AdminClaims = Depends(require_admin)
):
    """Клиенты удаленной группы остаются без группы."""
    group = _get_group_or_404(db, group_id)
    payload = group_payload(group, len(group.customers))
    try:
        group_service.delete_group(db, group)
    except ValidationError as e:
        raise handle_validation_error(e)

    return payload

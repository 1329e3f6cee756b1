from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CustomerBase(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    email: Optional[str] = None
    date_of_birth: date
    group_id: Optional[int] = None

    @field_validator("date_of_birth")
    @classmethod
    def not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("Дата рождения не может быть в будущем.")
        return value


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(CustomerBase):
    pass


class GroupSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class CustomerResponse(CustomerBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    last_payment_date: datetime
    age: str
    group: Optional[GroupSummary] = None


class CustomerDetailResponse(CustomerResponse):
    attendance_count: int
    is_overdue: bool


class OverdueCustomerResponse(CustomerResponse):
    attendance_count: int

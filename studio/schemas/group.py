from datetime import time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GroupBase(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    weekdays: str = ""
    start_time: time
    end_time: time
    price: float = Field(0, ge=0)
    is_permanent: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def local_time_only(cls, value: time) -> time:
        # Время занятий хранится без часового пояса
        if value.tzinfo is not None:
            raise ValueError("Время указывается без часового пояса.")
        return value


class GroupCreate(GroupBase):
    pass


class GroupUpdate(GroupBase):
    pass


class GroupMember(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    phone_number: str


class GroupResponse(GroupBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_count: int = 0


class GroupDetailResponse(GroupResponse):
    customers: List[GroupMember] = []

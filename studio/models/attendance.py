import enum

from sqlalchemy import Column, Integer, Date, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from studio.database import Base


class AttendanceStatus(str, enum.Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"


class Attendance(Base):
    """Отметка о посещении занятия"""
    __tablename__ = "attendances"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(Enum(AttendanceStatus, name="attendance_status"), nullable=False, default=AttendanceStatus.ABSENT)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="attendances")
    group = relationship("Group", back_populates="attendances")

    # Клиент, группа и дата вместе должны быть уникальны
    __table_args__ = (
        UniqueConstraint("customer_id", "group_id", "date", name="uix_customer_group_date"),
    )

    @property
    def is_present(self) -> bool:
        return self.status == AttendanceStatus.PRESENT

    def __repr__(self):
        return f"<Attendance(customer_id={self.customer_id}, group_id={self.group_id}, date={self.date}, status={self.status})>"

from sqlalchemy import Column, Integer, String, Text, Time, Float, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from studio.database import Base


class Group(Base):
    """Группа занятий"""
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    weekdays = Column(String, nullable=False, default="")  # e.g. "MONDAY,THURSDAY"
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    price = Column(Float, nullable=False, default=0)
    is_permanent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customers = relationship("Customer", back_populates="group", passive_deletes=True)
    attendances = relationship("Attendance", back_populates="group", passive_deletes=True)

    def __repr__(self):
        return f"<Group(id={self.id}, name={self.name}, weekdays={self.weekdays})>"

from studio.models.attendance import Attendance, AttendanceStatus
from studio.models.customer import Customer
from studio.models.group import Group
from studio.models.user import User

__all__ = ["Attendance", "AttendanceStatus", "Customer", "Group", "User"]

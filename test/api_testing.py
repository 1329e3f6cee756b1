"""Общие заготовки для тестов: БД SQLite в памяти и клиент API с токеном администратора."""
import unittest
from datetime import date, datetime, time, timedelta

import bcrypt
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import studio.models  # noqa: F401
from studio.database import Base, get_db
from studio.main import app
from studio.models.attendance import Attendance, AttendanceStatus
from studio.models.customer import Customer
from studio.models.group import Group
from studio.models.user import User
from studio.utils.auth_utils import create_access_token

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


def create_test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


class DatabaseTestCase(unittest.TestCase):
    """Чистая БД на каждый тест"""

    def setUp(self):
        self.engine = create_test_engine()
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db = self.SessionLocal()

    def tearDown(self):
        self.db.close()
        Base.metadata.drop_all(bind=self.engine)
        self.engine.dispose()

    def make_group(self, name="Акварель", weekdays="MONDAY,THURSDAY", **kwargs):
        group = Group(
            name=name,
            weekdays=weekdays,
            start_time=kwargs.pop("start_time", time(18, 0)),
            end_time=kwargs.pop("end_time", time(19, 30)),
            price=kwargs.pop("price", 1500),
            **kwargs
        )
        self.db.add(group)
        self.db.commit()
        self.db.refresh(group)
        return group

    def make_customer(self, first_name="Анна", last_name="Иванова", group=None, **kwargs):
        customer = Customer(
            first_name=first_name,
            last_name=last_name,
            phone_number=kwargs.pop("phone_number", "+79990000000"),
            date_of_birth=kwargs.pop("date_of_birth", date(2010, 5, 17)),
            group_id=group.id if group else None,
            **kwargs
        )
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def make_attendance(self, customer, group, day, status=AttendanceStatus.PRESENT):
        attendance = Attendance(customer_id=customer.id, group_id=group.id, date=day, status=status)
        self.db.add(attendance)
        self.db.commit()
        self.db.refresh(attendance)
        return attendance


class ApiTestCase(DatabaseTestCase):
    """TestClient поверх тестовой БД; self.auth_headers содержит токен администратора"""

    def setUp(self):
        super().setUp()

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

        # Малое число раундов, чтобы тесты шли быстро
        password_hash = bcrypt.hashpw(ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")
        self.admin = User(username=ADMIN_USERNAME, password=password_hash)
        self.db.add(self.admin)
        self.db.commit()
        self.db.refresh(self.admin)

        token = create_access_token({"sub": str(self.admin.id), "username": ADMIN_USERNAME})
        self.auth_headers = {"Authorization": f"Bearer {token}"}

    def tearDown(self):
        app.dependency_overrides.clear()
        super().tearDown()

    def fresh(self, model, object_id):
        """Объект из БД без учета кэша сессии"""
        self.db.expire_all()
        return self.db.get(model, object_id)


def days_ago(days: int) -> datetime:
    return datetime.now().replace(microsecond=0) - timedelta(days=days)

from datetime import date, timedelta

from api_testing import ApiTestCase, days_ago
from studio.models.attendance import Attendance
from studio.models.customer import Customer


class TestCustomersApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.group = self.make_group()

    def _payload(self, **overrides):
        payload = {
            "first_name": "Мария",
            "last_name": "Соколова",
            "phone_number": "+79991112233",
            "email": "maria@example.com",
            "date_of_birth": "2012-03-08",
            "group_id": self.group.id,
        }
        payload.update(overrides)
        return payload

    def test_create_and_get(self):
        response = self.client.post("/api/customers", json=self._payload(), headers=self.auth_headers)
        self.assertEqual(response.status_code, 201)
        created = response.json()
        self.assertEqual(created["group"], {"id": self.group.id, "name": self.group.name})
        self.assertTrue(created["age"].endswith(("год", "года", "лет")))

        response = self.client.get(f"/api/customers/{created['id']}", headers=self.auth_headers)
        self.assertEqual(response.status_code, 200)
        detail = response.json()
        self.assertEqual(detail["attendance_count"], 0)
        self.assertFalse(detail["is_overdue"])

    def test_create_with_unknown_group(self):
        response = self.client.post("/api/customers", json=self._payload(group_id=999), headers=self.auth_headers)
        self.assertEqual(response.status_code, 400)
        self.assertIn("group_id", response.json()["error"])

    def test_create_with_missing_field(self):
        payload = self._payload()
        del payload["first_name"]
        response = self.client.post("/api/customers", json=payload, headers=self.auth_headers)
        self.assertEqual(response.status_code, 400)
        self.assertIn("first_name", response.json()["error"])

    def test_create_with_future_birth_date(self):
        future = date.today() + timedelta(days=400)
        response = self.client.post(
            "/api/customers", json=self._payload(date_of_birth=future.isoformat()), headers=self.auth_headers
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("date_of_birth", response.json()["error"])
        self.assertEqual(self.db.query(Customer).count(), 0)

    def test_list_filtered_by_group(self):
        self.make_customer("Анна", "Иванова", group=self.group)
        self.make_customer("Петр", "Петров")

        everyone = self.client.get("/api/customers", headers=self.auth_headers).json()
        in_group = self.client.get(f"/api/customers?group_id={self.group.id}", headers=self.auth_headers).json()

        self.assertEqual(len(everyone), 2)
        self.assertEqual([c["first_name"] for c in in_group], ["Анна"])

    def test_update(self):
        customer = self.make_customer(group=self.group)

        response = self.client.put(
            f"/api/customers/{customer.id}",
            json=self._payload(first_name="Анастасия", group_id=None),
            headers=self.auth_headers,
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["first_name"], "Анастасия")
        self.assertIsNone(response.json()["group"])

    def test_missing_customer(self):
        for method in ("get", "delete", "patch"):
            with self.subTest(method=method):
                response = getattr(self.client, method)("/api/customers/999", headers=self.auth_headers)
                self.assertEqual(response.status_code, 404)
                self.assertIn("error", response.json())

    def test_delete(self):
        customer = self.make_customer()

        response = self.client.delete(f"/api/customers/{customer.id}", headers=self.auth_headers)

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(self.fresh(Customer, customer.id))

    def test_delete_with_attendance_is_rejected(self):
        customer = self.make_customer(group=self.group)
        self.make_attendance(customer, self.group, date.today() - timedelta(days=1))

        response = self.client.delete(f"/api/customers/{customer.id}", headers=self.auth_headers)

        self.assertEqual(response.status_code, 400)
        self.assertIsNotNone(self.fresh(Customer, customer.id))


class TestOverdueAndPaymentApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.group = self.make_group()

    def _customer_with_visits(self, name, visits):
        customer = self.make_customer(first_name=name, group=self.group, last_payment_date=days_ago(30))
        start = date.today() - timedelta(days=20)
        for offset in range(visits):
            self.make_attendance(customer, self.group, start + timedelta(days=offset))
        return customer

    def test_overdue_list(self):
        self._customer_with_visits("Шесть", 6)
        seven = self._customer_with_visits("Семь", 7)

        response = self.client.get("/api/customers/overdue", headers=self.auth_headers)

        self.assertEqual(response.status_code, 200)
        overdue = response.json()
        self.assertEqual([c["id"] for c in overdue], [seven.id])
        self.assertEqual(overdue[0]["attendance_count"], 7)

    def test_payment_resets_count(self):
        customer = self._customer_with_visits("Семь", 7)

        detail = self.client.get(f"/api/customers/{customer.id}", headers=self.auth_headers).json()
        self.assertEqual(detail["attendance_count"], 7)
        self.assertTrue(detail["is_overdue"])

        response = self.client.patch(f"/api/customers/{customer.id}", headers=self.auth_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["attendance_count"], 0)
        self.assertFalse(response.json()["is_overdue"])

        overdue = self.client.get("/api/customers/overdue", headers=self.auth_headers).json()
        self.assertEqual(overdue, [])
        self.db.expire_all()
        self.assertEqual(self.db.query(Attendance).count(), 7)

"""Seed the database with CRM demo data."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date
from decimal import Decimal
from crm.database import SessionLocal, engine, Base
import crm.models  # noqa: F401

from crm.models.user import User
from crm.models.office import Office
from crm.models.complex_object import ComplexObject
from crm.models.contract import Contract
from crm.models.contract_payment import ContractPayment


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        users = [
            User(email="root@example.com", first_name="Иван", last_name="Петров", role="SUPER_ADMIN"),
            User(email="admin@example.com", first_name="Ольга", last_name="Смирнова", role="ADMIN"),
            User(email="manager@example.com", first_name="Павел", last_name="Козлов", role="MANAGER"),
        ]
        db.add_all(users)
        db.flush()

        offices = [
            Office(name="Центральный офис", prefix="ЦО", address="ул. Ленина, 1", sort_order=1),
            Office(name="Офис на Садовой", prefix="СД", address="ул. Садовая, 15", sort_order=2),
        ]
        db.add_all(offices)
        db.flush()

        obj = ComplexObject(
            name="ЖК Северный, кв. 42",
            customer_name="Сидоров А.В.",
            customer_phones=["+7 900 000-00-01", "+7 900 000-00-02"],
            address="ул. Северная, 7",
            has_elevator=True,
            floor=9,
            office_id=offices[0].office_id,
            manager_id=users[2].user_id,
        )
        db.add(obj)
        db.flush()

        doors = Contract(
            contract_number="ЦО-0001",
            contract_date=date(2026, 3, 2),
            status="ACTIVE",
            complex_object_id=obj.complex_object_id,
            manager_id=users[2].user_id,
            customer_name="Сидоров А.В.",
            total_amount=Decimal("120000"),
        )
        kitchen = Contract(
            contract_number="СД-0001",
            contract_date=date(2026, 3, 5),
            status="IN_PROGRESS",
            office_id=offices[1].office_id,
            manager_id=users[2].user_id,
            customer_name="Кузнецова Е.П.",
            total_amount=Decimal("350000"),
        )
        db.add_all([doors, kitchen])
        db.flush()

        db.add_all([
            ContractPayment(contract_id=doors.contract_id, payment_date=date(2026, 3, 2),
                            amount=Decimal("40000"), payment_form="CASH", payment_type="PREPAYMENT",
                            manager_id=users[2].user_id),
            ContractPayment(contract_id=doors.contract_id, payment_date=date(2026, 3, 20),
                            amount=Decimal("80000"), payment_form="TERMINAL", payment_type="FINAL",
                            manager_id=users[2].user_id),
            ContractPayment(contract_id=kitchen.contract_id, payment_date=date(2026, 3, 5),
                            amount=Decimal("100000"), payment_form="INVOICE", payment_type="ADVANCE"),
        ])
        db.commit()
        print("Seed data created successfully.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()

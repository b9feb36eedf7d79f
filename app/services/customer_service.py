"""
Customer Service - Business Logic for Customers
"""
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional, Tuple
import logging

from app.models import Customer, AccountType
from app.schemas.customer import CustomerCreate, CustomerUpdate, AccountTypeLookup

logger = logging.getLogger(__name__)

class CustomerService:
    """Customer business logic"""

    SEARCH_LIMIT = 10

    @staticmethod
    def get_by_id(db: Session, customer_id: int) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.id == customer_id).first()

    @staticmethod
    def find_by_phone(db: Session, phone: str) -> List[Customer]:
        """Customers registered with an exact phone number"""
        if not phone or not phone.strip():
            return []
        return db.query(Customer)\
            .filter(Customer.phone == phone.strip())\
            .order_by(Customer.id.asc())\
            .all()

    @staticmethod
    def search_fuzzy(db: Session, query: str, limit: int = SEARCH_LIMIT) -> List[Customer]:
        """Case-insensitive partial match on name, phone, nickname and arabic name"""
        if not query or not query.strip():
            return []
        search_term = f"%{query.strip()}%"
        return db.query(Customer)\
            .filter(
                or_(
                    Customer.name.ilike(search_term),
                    Customer.phone.ilike(search_term),
                    Customer.nick_name.ilike(search_term),
                    Customer.arabic_name.ilike(search_term),
                )
            )\
            .order_by(Customer.name.asc())\
            .limit(limit)\
            .all()

    @staticmethod
    def find_primary_by_phone(db: Session, phone: Optional[str], exclude_id: Optional[int] = None) -> Optional[Customer]:
        if not phone or not phone.strip():
            return None
        query = db.query(Customer).filter(
            Customer.phone == phone.strip(),
            Customer.account_type == AccountType.PRIMARY.value,
        )
        if exclude_id is not None:
            query = query.filter(Customer.id != exclude_id)
        return query.order_by(Customer.id.asc()).first()

    @staticmethod
    def resolve_account_type(db: Session, phone: Optional[str], exclude_id: Optional[int] = None) -> AccountTypeLookup:
        """Secondary when the phone already belongs to a Primary account, else Primary"""
        primary = CustomerService.find_primary_by_phone(db, phone, exclude_id)
        if primary:
            return AccountTypeLookup(
                phone=phone,
                account_type=AccountType.SECONDARY.value,
                primary_customer_id=primary.id,
                primary_customer_name=primary.name,
            )
        return AccountTypeLookup(phone=phone, account_type=AccountType.PRIMARY.value)

    @staticmethod
    def _check_account_type(db: Session, account_type: Optional[str], phone: Optional[str], exclude_id: Optional[int] = None) -> Optional[str]:
        if account_type not in (None, AccountType.PRIMARY.value, AccountType.SECONDARY.value):
            return f"Invalid account type: {account_type}"
        if account_type == AccountType.SECONDARY.value and not CustomerService.find_primary_by_phone(db, phone, exclude_id):
            return "Secondary account requires the phone number of an existing Primary account"
        return None

    @staticmethod
    def create_customer(db: Session, data: CustomerCreate) -> Tuple[Optional[Customer], Optional[str]]:
        """Create customer. Returns (customer, error)"""
        values = data.model_dump()
        if not values.get("name") or not values["name"].strip():
            return None, "Name is required"

        if values.get("phone"):
            values["phone"] = values["phone"].strip()

        if not values.get("account_type"):
            values["account_type"] = CustomerService.resolve_account_type(db, values.get("phone")).account_type

        error = CustomerService._check_account_type(db, values["account_type"], values.get("phone"))
        if error:
            return None, error

        customer = Customer(**values)
        db.add(customer)
        db.commit()
        db.refresh(customer)

        logger.info(f"Created customer {customer.id} ({customer.account_type})")
        return customer, None

    @staticmethod
    def update_customer(db: Session, customer_id: int, data: CustomerUpdate) -> Tuple[Optional[Customer], Optional[str]]:
        """Update customer. Returns (customer, error); (None, None) when not found"""
        customer = CustomerService.get_by_id(db, customer_id)
        if not customer:
            return None, None

        changes = data.model_dump(exclude_unset=True)
        if "phone" in changes and changes["phone"]:
            changes["phone"] = changes["phone"].strip()

        phone = changes.get("phone", customer.phone)
        account_type = changes.get("account_type", customer.account_type)

        # A cleared phone falls back to a Primary account
        if "phone" in changes and not phone:
            account_type = AccountType.PRIMARY.value
            changes["account_type"] = account_type

        error = CustomerService._check_account_type(db, account_type, phone, exclude_id=customer.id)
        if error:
            return None, error

        for field, value in changes.items():
            setattr(customer, field, value)

        db.commit()
        db.refresh(customer)

        logger.info(f"Updated customer {customer.id}")
        return customer, None

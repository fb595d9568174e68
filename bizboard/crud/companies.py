"""Company-related CRUD operations."""

from typing import Optional
from sqlalchemy.orm import Session

from ..models import Company, User
from .. import schemas
from .common import apply_updates, is_valid_id, to_column_values


def get_company(db: Session, company_id: int) -> Optional[Company]:
    """Get a company by ID."""
    if not is_valid_id(company_id):
        return None
    return db.query(Company).filter(Company.id == company_id).first()


def create_company(db: Session, company_in: schemas.CompanyInsert) -> Company:
    """Create a new company (tenant root)."""
    db_company = Company(**company_in.model_dump())
    db.add(db_company)
    db.commit()
    db.refresh(db_company)
    return db_company


def update_company(db: Session, company_id: int, updates: dict) -> Optional[Company]:
    company = get_company(db, company_id)
    if not company:
        return None
    apply_updates(company, updates)
    db.commit()
    db.refresh(company)
    return company


def create_company_with_admin(
    db: Session, company_in: schemas.CompanyInsert, user_in: schemas.UserInsert
) -> User:
    """Create a company and its first user in one transaction.

    ``user_in.company_id`` is replaced by the new company's id. If the user
    cannot be stored (e.g. duplicate email) the company is not kept either.
    """
    db_company = Company(**company_in.model_dump())
    db.add(db_company)
    db.flush()

    values = to_column_values(user_in.model_dump())
    values["email"] = values["email"].lower()
    values["company_id"] = db_company.id
    db_user = User(**values)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

# tradedesk/routers/customers.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from tradedesk.database import get_db
from tradedesk.models.customers import Customer
from tradedesk.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
)

logger = logging.getLogger("app")

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
)


def get_customer_or_404(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()

    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found",
        )

    return customer


def _ensure_email_available(db: Session, email: str, customer_id: int | None = None):
    query = db.query(Customer).filter(Customer.email == email)
    if customer_id is not None:
        query = query.filter(Customer.id != customer_id)

    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Customer with this email already exists",
        )


@router.get("", response_model=list[CustomerResponse])
def list_customers(db: Session = Depends(get_db)):
    return db.query(Customer).order_by(Customer.id).all()


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return get_customer_or_404(db, customer_id)


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_customer(
    customer_data: CustomerCreate,
    db: Session = Depends(get_db),
):
    _ensure_email_available(db, customer_data.email)

    customer = Customer(
        name=customer_data.name,
        email=customer_data.email,
    )

    try:
        db.add(customer)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create customer")
        raise HTTPException(status_code=500, detail="Unable to create customer")

    db.refresh(customer)
    return customer


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    db: Session = Depends(get_db),
):
    customer = get_customer_or_404(db, customer_id)

    if customer_data.email is not None:
        _ensure_email_available(db, customer_data.email, customer_id)
        customer.email = customer_data.email

    if customer_data.name is not None:
        customer.name = customer_data.name

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update customer %s", customer_id)
        raise HTTPException(status_code=500, detail="Unable to update customer")

    db.refresh(customer)
    return customer


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
):
    customer = get_customer_or_404(db, customer_id)

    logger.info(f"Deleting customer {customer_id} with {len(customer.sales)} sales")

    # Sales, their items and custom prices go with the customer
    try:
        db.delete(customer)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete customer %s", customer_id)
        raise HTTPException(status_code=500, detail="Unable to delete customer")

    return {"message": "Customer deleted successfully"}

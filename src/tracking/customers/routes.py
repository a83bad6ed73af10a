import logging
from http import HTTPStatus

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.customers.exceptions import (
    EmailAlreadyRegisteredException,
    InvalidCredentialsException,
    MissingLoginIdentifierException,
)
from src.tracking.customers.models import CustomerModel
from src.tracking.customers.repositories import CustomerRepository
from src.tracking.customers.schemas import (
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
    LoginRequest,
    LoginResponse,
)
from src.tracking.database.dependencies import verify_database
from src.tracking.middleware.auth import authenticate_customer

logger = logging.getLogger(__name__)
auth_router = APIRouter(prefix="/auth", tags=["Auth"])
customer_router = APIRouter(prefix="/customers", tags=["Customers"])

customer_repo = CustomerRepository()


@auth_router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db_session: AsyncSession = Depends(verify_database),
):
    if credentials.customer_id is None and not credentials.email:
        raise MissingLoginIdentifierException

    if credentials.customer_id is not None:
        customer = await customer_repo.get_by_id(db_session, credentials.customer_id)
        identifier = str(credentials.customer_id)
    else:
        customer = await customer_repo.get_by_email(db_session, credentials.email)
        identifier = str(credentials.email)

    if customer is None:
        logger.warning(f"Failed login for {identifier}")
        raise InvalidCredentialsException(identifier)

    logger.info(f"Customer {customer.id} authenticated")
    return LoginResponse(customer_id=customer.id)


@customer_router.post(
    "", response_model=CustomerResponse, status_code=HTTPStatus.CREATED
)
async def create_customer(
    data: CustomerCreate,
    db_session: AsyncSession = Depends(verify_database),
):
    if data.email and await customer_repo.get_by_email(db_session, data.email):
        raise EmailAlreadyRegisteredException(data.email)
    return await customer_repo.create(db_session, data)


@customer_router.get("/me", response_model=CustomerResponse)
async def get_current_customer(
    customer: CustomerModel = Depends(authenticate_customer),
):
    return customer


@customer_router.put("/me", response_model=CustomerResponse)
async def update_current_customer(
    data: CustomerUpdate,
    customer: CustomerModel = Depends(authenticate_customer),
    db_session: AsyncSession = Depends(verify_database),
):
    if data.email:
        existing = await customer_repo.get_by_email(db_session, data.email)
        if existing is not None and existing.id != customer.id:
            raise EmailAlreadyRegisteredException(data.email)
    return await customer_repo.update(db_session, customer, data)

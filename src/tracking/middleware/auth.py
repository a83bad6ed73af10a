import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.config import get_settings
from src.tracking.customers.models import CustomerModel
from src.tracking.customers.repositories import CustomerRepository
from src.tracking.database.dependencies import verify_database
from src.tracking.middleware.exceptions import (
    InvalidCustomerIdError,
    MissingCustomerIdError,
)

logger = logging.getLogger(__name__)
customer_repo = CustomerRepository()


async def authenticate_customer(
    request: Request, db_session: AsyncSession = Depends(verify_database)
) -> CustomerModel:
    """Resolve the tenant named by the customer id header."""
    raw_customer_id = request.headers.get(get_settings().CUSTOMER_ID_HEADER)
    if not raw_customer_id:
        logger.warning("Missing customer ID in request")
        raise MissingCustomerIdError
    try:
        customer_id = int(raw_customer_id)
    except ValueError:
        logger.warning(f"Malformed customer ID: {raw_customer_id}")
        raise InvalidCustomerIdError(raw_customer_id)

    customer = await customer_repo.get_by_id(db_session, customer_id)
    if customer is None:
        logger.warning(f"Unknown customer ID: {customer_id}")
        raise InvalidCustomerIdError(raw_customer_id)
    return customer

from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.customers.models import CustomerModel
from src.tracking.customers.schemas import CustomerCreate, CustomerUpdate


class ICustomerRepository(ABC):
    @abstractmethod
    async def get_by_id(
        self, db: AsyncSession, customer_id: int
    ) -> Optional[CustomerModel]:
        pass

    @abstractmethod
    async def get_by_email(
        self, db: AsyncSession, email: str
    ) -> Optional[CustomerModel]:
        pass


class CustomerRepository(ICustomerRepository):
    async def get_by_id(
        self, db: AsyncSession, customer_id: int
    ) -> Optional[CustomerModel]:
        q = await db.execute(select(CustomerModel).where(CustomerModel.id == customer_id))
        return q.scalars().first()

    async def get_by_email(
        self, db: AsyncSession, email: str
    ) -> Optional[CustomerModel]:
        q = await db.execute(
            select(CustomerModel).where(CustomerModel.email == email.lower())
        )
        return q.scalars().first()

    async def create(self, db: AsyncSession, data: CustomerCreate) -> CustomerModel:
        model = CustomerModel(
            name=data.name, email=data.email.lower() if data.email else None
        )
        db.add(model)
        await db.commit()
        await db.refresh(model)
        return model

    async def update(
        self, db: AsyncSession, customer: CustomerModel, data: CustomerUpdate
    ) -> CustomerModel:
        customer.name = data.name
        customer.email = data.email.lower() if data.email else None
        await db.commit()
        await db.refresh(customer)
        return customer

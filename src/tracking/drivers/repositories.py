from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.drivers.models import DriverModel
from src.tracking.drivers.schemas import DriverCreate, DriverUpdate


class IDriverRepository(ABC):
    @abstractmethod
    async def get_by_id(
        self, db: AsyncSession, driver_id: int
    ) -> Optional[DriverModel]:
        pass

    @abstractmethod
    async def belongs_to_customer(
        self, db: AsyncSession, driver_id: int, customer_id: int
    ) -> bool:
        pass


class DriverRepository(IDriverRepository):
    async def get_by_id(
        self, db: AsyncSession, driver_id: int
    ) -> Optional[DriverModel]:
        q = await db.execute(select(DriverModel).where(DriverModel.id == driver_id))
        return q.scalars().first()

    async def find_by_customer_id(
        self, db: AsyncSession, customer_id: int
    ) -> List[DriverModel]:
        q = await db.execute(
            select(DriverModel)
            .where(DriverModel.customer_id == customer_id)
            .order_by(DriverModel.last_name, DriverModel.first_name)
        )
        return list(q.scalars().all())

    async def create(
        self, db: AsyncSession, customer_id: int, data: DriverCreate
    ) -> DriverModel:
        model = DriverModel(customer_id=customer_id, **data.model_dump())
        db.add(model)
        await db.commit()
        await db.refresh(model)
        return model

    async def update(
        self, db: AsyncSession, driver: DriverModel, data: DriverUpdate
    ) -> DriverModel:
        driver.first_name = data.first_name
        driver.last_name = data.last_name
        driver.vehicle_id = data.vehicle_id
        await db.commit()
        await db.refresh(driver)
        return driver

    async def delete(self, db: AsyncSession, driver: DriverModel) -> None:
        await db.delete(driver)
        await db.commit()

    async def belongs_to_customer(
        self, db: AsyncSession, driver_id: int, customer_id: int
    ) -> bool:
        q = await db.execute(
            select(DriverModel.id)
            .where(DriverModel.id == driver_id, DriverModel.customer_id == customer_id)
            .limit(1)
        )
        return q.scalars().first() is not None

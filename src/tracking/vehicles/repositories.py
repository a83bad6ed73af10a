from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.vehicles.models import VehicleModel
from src.tracking.vehicles.schemas import VehicleCreate, VehicleUpdate


class IVehicleRepository(ABC):
    @abstractmethod
    async def get_by_id(
        self, db: AsyncSession, vehicle_id: int
    ) -> Optional[VehicleModel]:
        pass

    @abstractmethod
    async def belongs_to_customer(
        self, db: AsyncSession, vehicle_id: int, customer_id: int
    ) -> bool:
        pass


class VehicleRepository(IVehicleRepository):
    async def get_by_id(
        self, db: AsyncSession, vehicle_id: int
    ) -> Optional[VehicleModel]:
        q = await db.execute(select(VehicleModel).where(VehicleModel.id == vehicle_id))
        return q.scalars().first()

    async def find_by_customer_id(
        self, db: AsyncSession, customer_id: int
    ) -> List[VehicleModel]:
        q = await db.execute(
            select(VehicleModel)
            .where(VehicleModel.customer_id == customer_id)
            .order_by(VehicleModel.id)
        )
        return list(q.scalars().all())

    async def create(
        self, db: AsyncSession, customer_id: int, data: VehicleCreate
    ) -> VehicleModel:
        model = VehicleModel(license_plate=data.license_plate, customer_id=customer_id)
        db.add(model)
        await db.commit()
        await db.refresh(model)
        return model

    async def update(
        self, db: AsyncSession, vehicle: VehicleModel, data: VehicleUpdate
    ) -> VehicleModel:
        vehicle.license_plate = data.license_plate
        await db.commit()
        await db.refresh(vehicle)
        return vehicle

    async def delete(self, db: AsyncSession, vehicle: VehicleModel) -> None:
        await db.delete(vehicle)
        await db.commit()

    async def belongs_to_customer(
        self, db: AsyncSession, vehicle_id: int, customer_id: int
    ) -> bool:
        q = await db.execute(
            select(VehicleModel.id)
            .where(
                VehicleModel.id == vehicle_id, VehicleModel.customer_id == customer_id
            )
            .limit(1)
        )
        return q.scalars().first() is not None

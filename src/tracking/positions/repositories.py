from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.tracking.positions.models import PositionModel
from src.tracking.positions.schemas import (
    PositionCreate,
    PositionResponse,
    VehiclePositionResponse,
)
from src.tracking.vehicles.models import VehicleModel


class IPositionRepository(ABC):
    @abstractmethod
    async def get_positions_by_vehicle_id(
        self, db: AsyncSession, vehicle_id: int, limit: Optional[int] = None
    ) -> List[PositionModel]:
        """Newest first. A limit of None returns every stored position."""
        pass

    @abstractmethod
    async def create_position(
        self, db: AsyncSession, position: PositionCreate
    ) -> PositionModel:
        pass

    @abstractmethod
    async def get_last_position(
        self, db: AsyncSession, vehicle_id: int
    ) -> Optional[PositionModel]:
        pass

    @abstractmethod
    async def get_current_positions_by_customer_id(
        self, db: AsyncSession, customer_id: int
    ) -> List[VehiclePositionResponse]:
        pass


class PositionRepository(IPositionRepository):
    async def get_positions_by_vehicle_id(
        self, db: AsyncSession, vehicle_id: int, limit: Optional[int] = None
    ) -> List[PositionModel]:
        stmt = (
            select(PositionModel)
            .where(PositionModel.vehicle_id == vehicle_id)
            .order_by(PositionModel.timestamp.desc(), PositionModel.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        q = await db.execute(stmt)
        return list(q.scalars().all())

    async def create_position(
        self, db: AsyncSession, position: PositionCreate
    ) -> PositionModel:
        model = PositionModel(**position.model_dump(exclude_none=True))
        db.add(model)
        await db.commit()
        await db.refresh(model)
        return model

    async def get_last_position(
        self, db: AsyncSession, vehicle_id: int
    ) -> Optional[PositionModel]:
        q = await db.execute(
            select(PositionModel)
            .where(PositionModel.vehicle_id == vehicle_id)
            .order_by(PositionModel.timestamp.desc(), PositionModel.id.desc())
            .limit(1)
        )
        return q.scalars().first()

    async def get_current_positions_by_customer_id(
        self, db: AsyncSession, customer_id: int
    ) -> List[VehiclePositionResponse]:
        latest = (
            select(
                PositionModel.vehicle_id,
                func.max(PositionModel.timestamp).label("latest_timestamp"),
            )
            .group_by(PositionModel.vehicle_id)
            .subquery()
        )
        q = await db.execute(
            select(PositionModel, VehicleModel.license_plate)
            .join(VehicleModel, PositionModel.vehicle_id == VehicleModel.id)
            .join(
                latest,
                (PositionModel.vehicle_id == latest.c.vehicle_id)
                & (PositionModel.timestamp == latest.c.latest_timestamp),
            )
            .where(VehicleModel.customer_id == customer_id)
            .order_by(PositionModel.timestamp.desc())
        )
        return [
            VehiclePositionResponse(
                **PositionResponse.model_validate(position).model_dump(),
                license_plate=license_plate,
            )
            for position, license_plate in q.all()
        ]

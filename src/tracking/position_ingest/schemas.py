import base64
import logging
from datetime import datetime, timezone

from src.tracking.position_ingest.exceptions import PositionDecodeException
from src.tracking.positions.schemas import PositionCreate

logger = logging.getLogger(__name__)


class PositionEventCreate(PositionCreate):
    """Position reported by a device through the message queue"""

    timestamp: datetime

    @classmethod
    def from_base64(cls, payload: str) -> "PositionEventCreate":
        """
        Decode ``vehicle_id:unix_ts:latitude:longitude:speed:ignition``.

        Speed may be empty; ignition is "true"/"false" or empty.
        """
        try:
            decoded_data = base64.b64decode(payload, validate=True).decode("utf-8")
            if decoded_data.startswith('"') and decoded_data.endswith('"'):
                decoded_data = decoded_data[1:-1]
            logger.debug(f"Decoded data: {decoded_data}")
            (
                vehicle_id,
                str_timestamp,
                latitude,
                longitude,
                speed,
                ignition,
            ) = decoded_data.split(":")
            return cls(
                vehicle_id=int(vehicle_id),
                timestamp=datetime.fromtimestamp(float(str_timestamp), tz=timezone.utc),
                latitude=float(latitude),
                longitude=float(longitude),
                speed=float(speed) if speed else None,
                ignition=ignition.lower() == "true" if ignition else None,
            )
        except Exception as e:
            logger.error(f"Failed to decode base64 event: {str(e)}")
            raise PositionDecodeException(payload, str(e))

    def dedup_key(self) -> str:
        return f"position_event:{self.vehicle_id}:{self.timestamp.timestamp()}"

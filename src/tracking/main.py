import asyncio
import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

import aio_pika
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.tracking.config import get_settings
from src.tracking.customers.routes import auth_router, customer_router
from src.tracking.database.database import DatabaseManager, db
from src.tracking.database.errors import integrity_error_response
from src.tracking.drivers.routes import driver_router
from src.tracking.health_check.routes import health_router
from src.tracking.logging_config import setup_logging
from src.tracking.position_ingest.handler import handle_position_event
from src.tracking.positions.routes import position_router
from src.tracking.redis.redis import redis_manager
from src.tracking.trips.routes import trip_router
from src.tracking.vehicles.routes import vehicle_router

setup_logging()
logger = logging.getLogger(__name__)
settings = get_settings()
PROJECT_NAME = settings.PROJECT_NAME
CUSTOMER_ID_HEADER = settings.CUSTOMER_ID_HEADER
ALL_CORS_ORIGINS = settings.all_cors_origins
RABBITMQ_URL = (
    f"amqp://{settings.RABBITMQ_USER}:{settings.RABBITMQ_PASSWORD}@"
    f"{settings.RABBITMQ_HOST}:{settings.RABBITMQ_PORT}/"
)
EXCHANGE_NAME = "events_exchange"
POSITION_QUEUE = "position_queue"
POSITION_ROUTING_KEY = "position"


# Custom OpenAPI schema to document the tenant header
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=PROJECT_NAME,
        version="0.1.0",
        description="Multi-tenant tracking of vehicles, drivers, positions and trips",
        routes=app.routes,
    )

    if "components" not in openapi_schema:
        openapi_schema["components"] = {}

    openapi_schema["components"]["securitySchemes"] = {
        "CustomerIdHeader": {
            "type": "apiKey",
            "in": "header",
            "name": CUSTOMER_ID_HEADER,
        }
    }

    for path in openapi_schema["paths"].values():
        for method in path.values():
            method.setdefault("security", []).append({"CustomerIdHeader": []})

    app.openapi_schema = openapi_schema
    return app.openapi_schema


async def consume_queue(channel, queue_name):
    queue = await channel.declare_queue(queue_name, durable=True)
    async with await db.get_client() as db_session:
        async with queue.iterator() as queue_iter:
            async for message in queue_iter:
                async with message.process():
                    try:
                        payload = message.body.decode()
                        if payload:
                            logger.debug("Consume position event")
                            result = await handle_position_event(db_session, payload)
                            if "error" in result:
                                logger.warning(
                                    f"[{queue_name}] Skipped message: {result['error']}"
                                )
                    except Exception as e:
                        logger.error(
                            f"[{queue_name}] Failed to process message: {str(e)}"
                        )


async def ingest_positions():
    connection = await aio_pika.connect_robust(RABBITMQ_URL)
    async with connection:
        channel = await connection.channel()

        exchange = await channel.declare_exchange(
            EXCHANGE_NAME, aio_pika.ExchangeType.DIRECT, durable=True
        )
        position_queue = await channel.declare_queue(POSITION_QUEUE, durable=True)
        await position_queue.bind(exchange, routing_key=POSITION_ROUTING_KEY)

        await consume_queue(channel, POSITION_QUEUE)


@asynccontextmanager
async def lifespan(app: FastAPI):  # type: ignore
    try:
        await DatabaseManager.connect()
        await DatabaseManager.create_tables()

        if settings.POSITION_QUEUE_ENABLED:
            await redis_manager.init_redis()
            app.state.position_consumer_task = asyncio.create_task(ingest_positions())
        else:
            app.state.position_consumer_task = None
            logger.info("Position queue ingestion disabled")

        logger.info("Startup complete")
        yield

        logger.info("Shutting down...")

        if app.state.position_consumer_task is not None:
            app.state.position_consumer_task.cancel()
            try:
                await app.state.position_consumer_task
            except asyncio.CancelledError:
                logger.info("Position consumer task cancelled.")

        await redis_manager.close_redis()
    except Exception as e:
        logger.error(f"Startup failed: {str(e)}")
        raise
    finally:
        await DatabaseManager.disconnect()
        logger.info("Shutdown complete")


app = FastAPI(title=PROJECT_NAME, version="0.1.0", lifespan=lifespan)
app.openapi = custom_openapi  # type: ignore[method-assign]


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    status_code, message = integrity_error_response(exc)
    logger.warning(
        f"Integrity violation on {request.url.path}: {type(exc.orig).__name__}"
    )
    return JSONResponse(status_code=status_code, content={"detail": message})


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=HTTPStatus.SERVICE_UNAVAILABLE,
        content={"detail": "Database error. Please try again later."},
    )


if ALL_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALL_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(customer_router)
api_router.include_router(vehicle_router)
api_router.include_router(driver_router)
api_router.include_router(position_router)
api_router.include_router(trip_router)
app.include_router(api_router)
app.include_router(health_router)

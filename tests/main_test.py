import asyncio
from http import HTTPStatus
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi import FastAPI
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.tracking.database.database import DatabaseManager
from src.tracking.main import (
    app,
    consume_queue,
    custom_openapi,
    ingest_positions,
    lifespan,
)


def make_channel(body):
    """Channel whose queue yields one message carrying ``body``."""
    message = MagicMock()
    message.body = body

    proc_ctx = AsyncMock()
    proc_ctx.__aenter__.return_value = None
    proc_ctx.__aexit__.return_value = None
    message.process = MagicMock(return_value=proc_ctx)

    message_iter = AsyncMock()
    message_iter.__aiter__.return_value = [message]

    queue_ctx = AsyncMock()
    queue_ctx.__aenter__.return_value = message_iter
    queue_ctx.__aexit__.return_value = None

    queue_mock = AsyncMock()
    queue_mock.iterator = MagicMock(return_value=queue_ctx)

    channel = AsyncMock()
    channel.declare_queue.return_value = queue_mock
    return channel


def make_session_client(mock_db):
    mock_session = AsyncMock()
    mock_session_cm = AsyncMock()
    mock_session_cm.__aenter__.return_value = mock_session
    mock_session_cm.__aexit__.return_value = None

    fut = asyncio.Future()
    fut.set_result(mock_session_cm)
    mock_db.get_client.return_value = fut
    return mock_session


async def test_custom_openapi_cached():
    app.openapi_schema = {"dummy": True}
    assert custom_openapi() == {"dummy": True}


async def test_custom_openapi_has_customer_header_security():
    schema = custom_openapi()
    security = schema["components"]["securitySchemes"]["CustomerIdHeader"]
    assert security == {"type": "apiKey", "in": "header", "name": "X-Customer-Id"}
    assert "/api/trips/{trip_id}/end" in schema["paths"]


@patch("src.tracking.main.handle_position_event", new_callable=AsyncMock)
@patch("src.tracking.main.db")
async def test_consume_position_queue(mock_db, mock_handle_position_event):
    DatabaseManager.is_connected = True
    mock_session = make_session_client(mock_db)
    mock_handle_position_event.return_value = {"id": 1}

    await consume_queue(make_channel(b"NzoxNzA0MTAzMjAwOjE6MjosOg=="), "position_queue")

    mock_handle_position_event.assert_awaited_once_with(
        mock_session, "NzoxNzA0MTAzMjAwOjE6MjosOg=="
    )


@patch("src.tracking.main.handle_position_event", new_callable=AsyncMock)
@patch("src.tracking.main.db")
async def test_consume_queue_skipped_message(
    mock_db, mock_handle_position_event, caplog
):
    make_session_client(mock_db)
    mock_handle_position_event.return_value = {"error": "Duplicate event"}

    with caplog.at_level("WARNING"):
        await consume_queue(make_channel(b"payload"), "position_queue")

    assert "Skipped message: Duplicate event" in caplog.text


@patch("src.tracking.main.handle_position_event", new_callable=AsyncMock)
@patch("src.tracking.main.db")
async def test_consume_queue_empty_body(mock_db, mock_handle_position_event):
    make_session_client(mock_db)

    await consume_queue(make_channel(b""), "position_queue")

    mock_handle_position_event.assert_not_awaited()


@patch("src.tracking.main.handle_position_event", new_callable=AsyncMock)
@patch("src.tracking.main.db")
async def test_consume_queue_error(mock_db, mock_handle_position_event, caplog):
    make_session_client(mock_db)
    mock_handle_position_event.side_effect = RuntimeError("database unavailable")

    with caplog.at_level("ERROR"):
        await consume_queue(make_channel(b"payload"), "position_queue")

    assert "Failed to process message: database unavailable" in caplog.text


@patch("src.tracking.main.consume_queue", new_callable=AsyncMock)
@patch("src.tracking.main.aio_pika.connect_robust", new_callable=AsyncMock)
async def test_ingest_positions(mock_connect_robust, mock_consume_queue):
    mock_conn = AsyncMock()
    mock_connect_robust.return_value = mock_conn
    mock_channel = AsyncMock()
    mock_conn.channel.return_value = mock_channel
    mock_exchange = AsyncMock()
    mock_channel.declare_exchange.return_value = mock_exchange
    mock_queue = AsyncMock()
    mock_channel.declare_queue.return_value = mock_queue

    await ingest_positions()

    mock_queue.bind.assert_awaited_once_with(mock_exchange, routing_key="position")
    mock_consume_queue.assert_awaited_once_with(mock_channel, "position_queue")


async def test_sqlalchemy_exception_handler(async_client):
    """SQLAlchemy errors surface as 503."""
    response = await async_client.get("/force-sqlalchemy-error")
    assert response.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    assert "Database error" in response.json()["detail"]
    assert "error" not in response.json()


async def test_integrity_error_unique_violation(async_client):
    response = await async_client.get("/force-unique-violation")

    assert response.status_code == HTTPStatus.CONFLICT
    assert response.json() == {"detail": "Resource already exists."}
    assert "INSERT" not in response.text


async def test_integrity_error_foreign_key_violation(async_client):
    response = await async_client.get("/force-foreign-key-violation")

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json() == {"detail": "Referenced resource does not exist."}
    assert "INSERT" not in response.text


@patch("src.tracking.main.ingest_positions", new_callable=AsyncMock)
@patch("src.tracking.main.redis_manager.init_redis", new_callable=AsyncMock)
@patch("src.tracking.main.redis_manager.close_redis", new_callable=AsyncMock)
@patch("src.tracking.main.DatabaseManager.connect", new_callable=AsyncMock)
@patch("src.tracking.main.DatabaseManager.disconnect", new_callable=AsyncMock)
@patch("src.tracking.main.DatabaseManager.create_tables", new_callable=AsyncMock)
async def test_lifespan_without_queue(
    mock_create_tables,
    mock_disconnect,
    mock_connect,
    mock_close_redis,
    mock_init_redis,
    mock_ingest_positions,
):
    test_app = FastAPI(lifespan=lifespan)

    with patch(
        "src.tracking.main.settings", SimpleNamespace(POSITION_QUEUE_ENABLED=False)
    ):
        async with test_app.router.lifespan_context(test_app):
            mock_connect.assert_awaited_once()
            mock_create_tables.assert_awaited_once()
            mock_init_redis.assert_not_awaited()

    mock_ingest_positions.assert_not_awaited()
    mock_disconnect.assert_awaited_once()


@patch("src.tracking.main.ingest_positions", new_callable=AsyncMock)
@patch("src.tracking.main.redis_manager.init_redis", new_callable=AsyncMock)
@patch("src.tracking.main.redis_manager.close_redis", new_callable=AsyncMock)
@patch("src.tracking.main.DatabaseManager.connect", new_callable=AsyncMock)
@patch("src.tracking.main.DatabaseManager.disconnect", new_callable=AsyncMock)
@patch("src.tracking.main.DatabaseManager.create_tables", new_callable=AsyncMock)
async def test_lifespan_with_queue(
    mock_create_tables,
    mock_disconnect,
    mock_connect,
    mock_close_redis,
    mock_init_redis,
    mock_ingest_positions,
):
    test_app = FastAPI(lifespan=lifespan)

    with patch(
        "src.tracking.main.settings", SimpleNamespace(POSITION_QUEUE_ENABLED=True)
    ):
        async with test_app.router.lifespan_context(test_app):
            mock_init_redis.assert_awaited_once()
            assert test_app.state.position_consumer_task is not None

    mock_close_redis.assert_awaited_once()
    mock_disconnect.assert_awaited_once()


# Route used only to exercise the SQLAlchemy exception handler
@app.get("/force-sqlalchemy-error")
async def force_sqlalchemy_error():
    raise SQLAlchemyError("Simulated DB error")


class PgDriverError(Exception):
    def __init__(self, message, sqlstate):
        super().__init__(message)
        self.sqlstate = sqlstate


@app.get("/force-unique-violation")
async def force_unique_violation():
    raise IntegrityError(
        "INSERT INTO customers (name, email) VALUES ($1, $2)",
        ("Acme", "ops@acmelogistics.com"),
        PgDriverError(
            'duplicate key value violates unique constraint "customers_email_key"',
            "23505",
        ),
    )


@app.get("/force-foreign-key-violation")
async def force_foreign_key_violation():
    raise IntegrityError(
        "INSERT INTO trips (vehicle_id) VALUES ($1)",
        (999,),
        PgDriverError(
            'insert or update on table "trips" violates foreign key constraint',
            "23503",
        ),
    )

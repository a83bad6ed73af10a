import pytest

VALID_SETTINGS_DATA = {
    "ENVIRONMENT": "production",
    "CUSTOMER_ID_HEADER": "X-Customer-Id",
    "FASTAPI_CORS_ORIGINS": ["http://localhost"],
    "RABBITMQ_HOST": "localhost",
    "RABBITMQ_PORT": 5672,
    "RABBITMQ_USER": "guest",
    "RABBITMQ_PASSWORD": "guest",
    "POSITION_QUEUE_ENABLED": False,
    "REDIS_HOST": "redis",
    "REDIS_PORT": 6379,
    "POSITION_DEDUP_TTL_SECONDS": 3600,
    "POSTGRES_USER": "postgres",
    "POSTGRES_PASSWORD": "postgres",
    "POSTGRES_HOST": "localhost",
    "POSTGRES_PORT": 5432,
    "POSTGRES_DB": "postgres",
    "DEFAULT_POSITION_LIMIT": 100,
}


def customer_headers(customer_id) -> dict:
    return {VALID_SETTINGS_DATA["CUSTOMER_ID_HEADER"]: str(customer_id)}


@pytest.fixture(scope="function", autouse=True)
def mock_get_settings(monkeypatch):
    """
    Mock the get_settings function to return a test configuration.
    """
    from src.tracking.config import Settings, get_settings

    def _get_settings():
        return Settings(**VALID_SETTINGS_DATA)

    get_settings.cache_clear()
    monkeypatch.setattr("src.tracking.config.get_settings", _get_settings)
    monkeypatch.setattr("src.tracking.middleware.auth.get_settings", _get_settings)
    monkeypatch.setattr("src.tracking.positions.routes.get_settings", _get_settings)
    monkeypatch.setattr(
        "src.tracking.position_ingest.utils.get_settings", _get_settings
    )
    monkeypatch.setattr("src.tracking.redis.redis.get_settings", _get_settings)

from src.tracking.database.database import DatabaseManager


async def test_health_check(async_client):
    DatabaseManager.is_connected = True
    response = await async_client.get("/health")
    DatabaseManager.is_connected = False
    assert response.status_code == 200, response.text
    assert response.json() == {"status": "ok", "database": "connected"}


async def test_health_check_database_down(async_client):
    DatabaseManager.is_connected = False
    response = await async_client.get("/health")
    assert response.status_code == 200, response.text
    assert response.json()["database"] == "disconnected"

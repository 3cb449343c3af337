from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from blogapi.config import Settings


# Crea el cliente de conexión (no abre sockets hasta la primera operación)
def create_client(settings: Settings) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(settings.MONGODB_URI)


# Devuelve la base de datos configurada
def get_database(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    return client[settings.DB_NAME]


def close_client(client: AsyncIOMotorClient | None) -> None:
    # El close() de motor no es asíncrono
    if client is not None:
        client.close()

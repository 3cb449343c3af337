from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Conexión al almacén de documentos
    MONGODB_URI: str = "mongodb://localhost:27017"
    DB_NAME: str = "messages"

    # Firma de los JWT (en producción se define por variable de entorno)
    SECRET_KEY: str = "the-secret-parameter"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    PASSWORD_HASH_ROUNDS: int = 12

    IMAGES_DIR: str = "images"
    POSTS_PER_PAGE: int = 2
    GRAPHIQL: bool = True

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()

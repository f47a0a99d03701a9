from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./auth.db"
    # обязательные: без них сервис не стартует
    JWT_SECRET: str = ""
    JWT_EXPIRE: str = ""
    JWT_ALGORITHM: str = "HS256"
    BCRYPT_ROUNDS: int = 12
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

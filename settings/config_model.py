from pydantic import BaseModel, Field
from typing import List, Literal, Optional

class DatabaseConfig(BaseModel):
    url: Optional[str] = Field(default=None, description="SQLAlchemy URL; defaults to a SQLite file in data_dir")
    echo: bool = Field(default=False, description="Log emitted SQL statements")

class StorageConfig(BaseModel):
    backend: Literal["sql", "memory"] = Field(default="sql", description="Where results and attempt claims are kept")

class ApiConfig(BaseModel):
    host: str = Field(default="127.0.0.1", description="Bind address for uvicorn")
    port: int = Field(default=3000, description="Bind port for uvicorn")
    api_prefix: str = Field(default="/api", description="Prefix applied to every route")
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:3001",
            "http://localhost:4200",
        ],
        description="Origins allowed by the CORS middleware",
    )

class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Application log level")
    log_dir: Optional[str] = Field(default=None, description="Directory for the rotating log file; stderr only if unset")

class AppConfig(BaseModel):
    data_dir: str = Field(default="./data", description="Path for the SQLite database and logs")
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        validate_assignment = True

    def database_url(self) -> str:
        if self.database.url:
            return self.database.url
        return f"sqlite:///{self.data_dir}/quiz.db"

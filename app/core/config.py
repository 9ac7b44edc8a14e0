from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    PROJECT_NAME: str = "FinanceAnalytics"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_TRANSACTIONS_TABLE: str = Field(default="finance-transactions")
    DYNAMO_BUDGETS_TABLE: str = Field(default="finance-budgets")

    # JWT Authentication (tokens are issued by the auth service)
    JWT_SECRET_KEY: str = Field(default="3f9c1e7a52b84d06a1e4c8d2b7f05e9a6c3d1b8e4f27a09c5d6e8b1a3c7f2d40")
    JWT_ALGORITHM: str = "HS256"

    # Analytics windows, in months
    PROJECTION_MONTHS: int = 3
    HISTORY_MONTHS: int = 3
    TREND_MONTHS: int = 6
    DEFAULT_PROJECTION_METHOD: str = "weighted_average"


settings = Settings()

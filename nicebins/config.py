from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library defaults loaded from environment variables and optionally .env (local).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # -------------------------
    # Numeric binning
    # -------------------------
    maxbins: int = Field(15, alias="NICEBINS_MAXBINS", gt=0)
    base: float = Field(10, alias="NICEBINS_BASE", gt=1)
    div: List[float] = Field(default_factory=lambda: [5, 2], alias="NICEBINS_DIV")

    # -------------------------
    # Date binning
    # -------------------------
    date_maxbins: int = Field(20, alias="NICEBINS_DATE_MAXBINS", gt=0)
    date_minbins: int = Field(4, alias="NICEBINS_DATE_MINBINS", gt=0)

    # -------------------------
    # Upper bound on step growth iterations
    # -------------------------
    max_iterations: int = Field(1000, alias="NICEBINS_MAX_ITERATIONS", gt=0)


settings = Settings()

from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Deal defaults
    default_term_years: int = 10

    # Sensitivity grid approval bands
    default_minimum_irr: Decimal = Decimal("0.15")
    grid_borderline_spread: Decimal = Decimal("0.05")  # Blue zone above the minimum


settings = Settings()

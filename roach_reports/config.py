from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./data/roach_reports.sqlite3"
    cors_origins: list[str] = ["http://localhost:19006", "http://localhost:8081"]
    log_level: str = "INFO"
    seed_demo_data: bool = True

    nearby_default_radius_meters: float = 1000.0
    nearby_max_results: int = 100
    search_min_length: int = 2
    search_max_results: int = 20
    reports_page_size: int = 20

    places_api_key: str = ""  # empty = places proxy and geocoding disabled
    places_base_url: str = "https://maps.googleapis.com/maps/api"
    places_timeout_seconds: float = 10.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

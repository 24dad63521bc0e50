from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # A provider key selects the direct provider; without one the backend
    # proxy is used, and without a backend the fallback generator.
    booking_api_key: str = ""
    booking_api_host: str = "booking-com15.p.rapidapi.com"
    airbnb_api_key: str = ""
    airbnb_api_host: str = "airbnb13.p.rapidapi.com"
    opentable_api_key: str = ""
    opentable_api_host: str = "opentable.p.rapidapi.com"
    backend_base_url: str = ""
    fallback_seed: int = 2030
    log_level: str = "INFO"

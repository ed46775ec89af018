import os

from pydantic import BaseModel

DEFAULT_BASE_URL = "http://localhost:10006/api/rest/v1"

class Settings(BaseModel):
    service_name: str = "corda-rest-adapter"
    environment: str = os.getenv("ADAPTER_ENV", "dev")

    # Gateway settings
    default_base_url: str = os.getenv("CORDA_BASE_URL", DEFAULT_BASE_URL)
    request_timeout_seconds: float = float(os.getenv("CORDA_REQUEST_TIMEOUT", "30"))

    log_level: str = os.getenv("ADAPTER_LOG_LEVEL", "INFO")

settings = Settings()

"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y valores por defecto del cliente Onspring,
del pool HTTP y del logging.
"""
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno (o `.env`) y proporciona valores por defecto.

    Las credenciales de las instancias NO viven aqui: forman parte de la
    configuracion de cada corrida (archivo JSON o prompts).
    """

    APP_NAME: str = Field(default="Onspring Attachment Transferrer")
    APP_VERSION: str = Field(default="1.0.0")

    # Onspring API
    ONSPRING_BASE_URL: str = Field(default="https://api.onspring.com")
    ONSPRING_API_VERSION: str = Field(default="2")
    HTTP_TIMEOUT_SECONDS: int = Field(default=120)
    HTTP_MAX_RETRIES: int = Field(default=3)

    # Threads dedicados para las llamadas HTTP (bloqueantes)
    HTTP_MAX_WORKERS: int = Field(default=8)

    # Espera entre reintentos de una pagina que fallo
    PAGE_FETCH_RETRY_DELAY_SECONDS: float = Field(default=1.0)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: str = Field(default=".")

    @computed_field
    @property
    def api_base_url(self) -> str:
        """URL base normalizada (sin barra final)."""
        return self.ONSPRING_BASE_URL.rstrip("/")

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


# Instancia global de configuracion
settings = Settings()

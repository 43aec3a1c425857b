"""
Configuracion de loguru para una corrida.

- Consola: nivel elegido por el usuario, con colores.
- Archivo: JSON (una linea por evento), nivel DEBUG, en una carpeta por corrida.

El archivo siempre se escribe y su ruta se informa al terminar.
"""
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from loguru import logger

LOG_FILE_NAME = "log.json"
CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
)


def get_log_path(log_dir: Union[str, Path] = ".", now: Optional[datetime] = None) -> Path:
    """
    Ruta estable del log de la corrida: <log_dir>/<yyyyMMddHHmm>-output/log.json
    """
    now = now or datetime.now()
    output_dir = f"{now.strftime('%Y%m%d%H%M')}-output"
    return Path(log_dir).resolve() / output_dir / LOG_FILE_NAME


def configure_logging(log_level: str, log_path: Path) -> None:
    """
    Reemplaza los handlers por defecto por consola + archivo JSON.

    enqueue=True hace el sink de archivo seguro frente a escrituras desde
    los threads del pool HTTP.
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.remove()
    logger.add(sys.stderr, level=log_level.upper(), format=CONSOLE_FORMAT)
    logger.add(str(log_path), level="DEBUG", serialize=True, enqueue=True)


def shutdown_logging() -> None:
    """Vacia la cola del sink de archivo antes de salir."""
    logger.complete()
    logger.remove()

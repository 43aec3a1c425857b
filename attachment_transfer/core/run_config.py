"""
Carga de la configuracion de una corrida desde un archivo JSON.

Formato:

    {
      "SourceInstanceKey": "...",
      "TargetInstanceKey": "...",
      "SourceAppId": 100,
      "TargetAppId": 200,
      "SourceMatchField": 1000,
      "TargetMatchField": 2000,
      "AttachmentFieldMappings": "1001|2001,1002|2002",
      "FlagFieldId": 1003,
      "ProcessValue": "Process",
      "ProcessedValue": "Processed"
    }

SourceMatchField/TargetMatchField aceptan tambien la forma SourceMatchFieldId/TargetMatchFieldId.
Los ids pueden venir como numero o como texto ("100").
AttachmentFieldMappings acepta tambien un objeto {"1001": 2001}.
El bloque de checkpoint (FlagFieldId/ProcessValue/ProcessedValue) es opcional,
pero si aparece debe estar completo.
"""
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator, model_validator

from attachment_transfer.domain.entities.transfer_config import FlagFieldConfig, TransferConfig
from attachment_transfer.shared.exceptions import InvalidConfigurationException


def parse_field_mappings(raw: str) -> Dict[int, int]:
    """
    Parsea mapeos con forma "origen|destino,origen|destino".

    Raises:
        ValueError: si algun par no tiene exactamente dos ids enteros positivos
            o si un campo origen se repite.
    """
    if raw is None or not str(raw).strip():
        raise ValueError("los mapeos de campos no pueden estar vacios")

    mappings: Dict[int, int] = {}
    for pair in str(raw).split(","):
        ids = [part.strip() for part in pair.split("|")]
        if len(ids) != 2:
            raise ValueError(f"'{pair.strip()}' no es un mapeo valido (use origen|destino)")
        source_id, target_id = (_parse_id(value) for value in ids)
        if source_id in mappings:
            raise ValueError(f"el campo origen {source_id} esta mapeado mas de una vez")
        mappings[source_id] = target_id
    return mappings


def _parse_id(value: Any) -> int:
    try:
        parsed = int(str(value).strip())
    except ValueError as e:
        raise ValueError(f"'{value}' no es un id valido") from e
    if parsed <= 0:
        raise ValueError(f"'{value}' no es un id valido")
    return parsed


class RunConfigFile(BaseModel):
    """Esquema del archivo de configuracion."""

    source_instance_key: str = Field(..., alias="SourceInstanceKey", min_length=1)
    target_instance_key: str = Field(..., alias="TargetInstanceKey", min_length=1)
    source_app_id: int = Field(..., alias="SourceAppId", gt=0)
    target_app_id: int = Field(..., alias="TargetAppId", gt=0)
    source_match_field_id: int = Field(
        ..., validation_alias=AliasChoices("SourceMatchField", "SourceMatchFieldId"), gt=0
    )
    target_match_field_id: int = Field(
        ..., validation_alias=AliasChoices("TargetMatchField", "TargetMatchFieldId"), gt=0
    )
    attachment_field_mappings: Dict[int, int] = Field(..., alias="AttachmentFieldMappings")
    flag_field_id: Optional[int] = Field(None, alias="FlagFieldId", gt=0)
    process_value: Optional[str] = Field(None, alias="ProcessValue")
    processed_value: Optional[str] = Field(None, alias="ProcessedValue")

    @field_validator("source_instance_key", "target_instance_key", "process_value", "processed_value")
    @classmethod
    def _not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("no puede estar en blanco")
        return value.strip() if value is not None else None

    @field_validator("attachment_field_mappings", mode="before")
    @classmethod
    def _mappings(cls, value: Union[str, Dict[Any, Any]]) -> Dict[int, int]:
        if isinstance(value, dict):
            mappings = {_parse_id(k): _parse_id(v) for k, v in value.items()}
            if not mappings:
                raise ValueError("los mapeos de campos no pueden estar vacios")
            return mappings
        return parse_field_mappings(value)

    @model_validator(mode="after")
    def _flag_complete(self) -> "RunConfigFile":
        flag_values = (self.flag_field_id, self.process_value, self.processed_value)
        if any(v is not None for v in flag_values) and not all(v is not None for v in flag_values):
            raise ValueError("FlagFieldId, ProcessValue y ProcessedValue deben configurarse juntos")
        return self

    def to_transfer_config(self) -> TransferConfig:
        flag_field = None
        if self.flag_field_id is not None:
            flag_field = FlagFieldConfig(
                field_id=self.flag_field_id,
                process_value=self.process_value,
                processed_value=self.processed_value,
            )
        return TransferConfig(
            source_instance_key=self.source_instance_key,
            target_instance_key=self.target_instance_key,
            source_app_id=self.source_app_id,
            target_app_id=self.target_app_id,
            source_match_field_id=self.source_match_field_id,
            target_match_field_id=self.target_match_field_id,
            attachment_field_mappings=self.attachment_field_mappings,
            flag_field=flag_field,
        )


def load_transfer_config(path: Union[str, Path]) -> TransferConfig:
    """
    Lee y valida el archivo de configuracion.

    Raises:
        InvalidConfigurationException: si el archivo no existe o no se puede
            leer, si no es JSON valido, o si no cumple el esquema.
    """
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise InvalidConfigurationException(f"No existe el archivo de configuracion: {config_path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidConfigurationException(f"No se pudo leer el archivo de configuracion {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidConfigurationException(f"El archivo {config_path} no es JSON valido: {e}") from e

    if not isinstance(raw, dict):
        raise InvalidConfigurationException(f"El archivo {config_path} debe contener un objeto JSON")

    try:
        return RunConfigFile.model_validate(raw).to_transfer_config()
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise InvalidConfigurationException(
            f"Configuracion invalida ({field or 'archivo'}): {first.get('msg')}",
            field=field or None,
        ) from e

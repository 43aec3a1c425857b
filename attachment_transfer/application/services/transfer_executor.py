"""
Transferencia de un archivo del campo origen al campo destino mapeado.

Cada archivo es una operacion independiente y no transaccional:
- metadata (nombre, notas) y contenido se piden por separado; ambos deben existir
- el archivo se guarda con el nombre, content type, bytes y notas originales
- cualquier fallo se loguea y se reporta en el TransferOutcome, sin excepciones,
  para que los archivos/campos/registros hermanos sigan procesandose
"""
from __future__ import annotations

from attachment_transfer.application.services.run_context import RunContext
from attachment_transfer.domain.entities.results import Failure, TransferOutcome


class TransferExecutor:
    def __init__(self, context: RunContext) -> None:
        self._ctx = context

    async def transfer(
        self,
        source_record_id: int,
        source_field_id: int,
        file_id: int,
        target_record_id: int,
        target_field_id: int,
    ) -> TransferOutcome:
        config = self._ctx.config
        gateway = self._ctx.gateway
        log = self._ctx.log.bind(
            source_record_id=source_record_id,
            source_field_id=source_field_id,
            file_id=file_id,
        )
        where = (
            f"File {file_id} del campo origen {source_field_id} "
            f"(Registro {source_record_id}, App {config.source_app_id})"
        )

        info = await gateway.get_file_info(
            config.source_instance_key, source_record_id, source_field_id, file_id
        )
        if isinstance(info, Failure):
            log.warning(f"No se pudo obtener la información del {where}: {info.message}")
            return TransferOutcome(source_file_id=file_id, error=info)

        content = await gateway.get_file(
            config.source_instance_key, source_record_id, source_field_id, file_id
        )
        if isinstance(content, Failure):
            log.warning(f"No se pudo descargar el {where}: {content.message}")
            return TransferOutcome(source_file_id=file_id, error=content)

        saved = await gateway.save_file(
            config.target_instance_key,
            target_record_id,
            target_field_id,
            info.value.name,
            content.value.content_type,
            content.value.content,
            info.value.notes or "",
        )
        if isinstance(saved, Failure):
            log.warning(
                f"El {where} no se pudo guardar en el campo destino {target_field_id} "
                f"del Registro {target_record_id} (App {config.target_app_id}): {saved.message}"
            )
            return TransferOutcome(source_file_id=file_id, error=saved)

        log.info(
            f"{where} guardado como File {saved.value} en el campo destino {target_field_id} "
            f"del Registro {target_record_id} (App {config.target_app_id})."
        )
        return TransferOutcome(source_file_id=file_id, target_file_id=saved.value)

"""
Extracción de los ids de archivo transferibles de un campo de adjuntos.
"""

from __future__ import annotations

from attachment_transfer.domain.entities.field_values import (
    AttachmentListValue,
    FieldValue,
    FileListValue,
)


def extract_file_ids(value: FieldValue) -> list[int]:
    """
    Ids de archivo elegibles, en el orden del campo origen.

    - FileList: todos sus ids (siempre son archivos internos).
    - AttachmentList: solo entradas con almacenamiento interno; las externas
      no se pueden descargar por la API de archivos.
    - Cualquier otra variante: lista vacía, no es un error.
    """
    if isinstance(value, FileListValue):
        return list(value.file_ids)
    if isinstance(value, AttachmentListValue):
        return [entry.file_id for entry in value.entries if entry.is_internal]
    return []

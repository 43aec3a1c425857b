"""
Estimación de la cantidad de requests que hará una corrida.

Útil para planificar contra los límites de la API antes de ejecutar:
- 3 requests de validación (2 campos de match + campo de checkpoint)
- por página: 1 request para obtener los registros
- por registro: 1 búsqueda de match + 1 actualización del checkpoint
- por archivo: 3 requests (info, contenido, guardado)
"""
from __future__ import annotations

import math

VALIDATION_REQUESTS = 3
REQUESTS_PER_PAGE = 1
REQUESTS_PER_RECORD = 2
REQUESTS_PER_FILE = 3


def estimate_request_count(
    total_records: int,
    fields_per_record: int,
    files_per_field: int,
    page_size: int,
) -> int:
    if page_size < 1:
        raise ValueError("page_size debe ser >= 1")
    if min(total_records, fields_per_record, files_per_field) < 0:
        raise ValueError("los conteos no pueden ser negativos")

    total_pages = max(1, math.ceil(total_records / page_size))
    per_record = REQUESTS_PER_RECORD + fields_per_record * files_per_field * REQUESTS_PER_FILE
    return (
        VALIDATION_REQUESTS
        + total_pages * REQUESTS_PER_PAGE
        + total_records * per_record
    )

"""
Expresiones de filtro para los queries de Onspring.

Gramática usada:
- `<fieldId> eq '<valor>'`       match exacto (búsqueda del registro destino)
- `<fieldId> contains '<valor>'` filtro de checkpoint (campo de lista)

Nota: el valor se inserta tal cual. Onspring no documenta cómo escapar
comillas dentro del valor; si se define un esquema, este es el único lugar
donde aplicarlo.
"""


def build_equals_filter(field_id: int, value: str) -> str:
    return f"{field_id} eq '{value}'"


def build_contains_filter(field_id: int, value: str) -> str:
    return f"{field_id} contains '{value}'"

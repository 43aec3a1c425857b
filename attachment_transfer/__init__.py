"""
Transferencia de adjuntos entre apps de Onspring.

Copia los archivos de los campos de adjuntos de cada registro origen al
registro destino que comparte el mismo valor en el campo de match.
"""

__version__ = "1.0.0"

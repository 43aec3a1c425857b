"""
Capa de dominio: entidades puras, sin I/O.
"""

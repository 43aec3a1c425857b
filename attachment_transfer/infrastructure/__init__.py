"""
Capa de infraestructura: integraciones externas.
"""

"""
Capa de aplicacion: servicios del pipeline y casos de uso.
"""

"""
Configuracion y logging de la aplicacion.
"""

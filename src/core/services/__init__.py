"""Servicios del Core: motor de peticiones, reintento de auth y paginación."""

"""Servicios del Core (lógica sin I/O de red)."""

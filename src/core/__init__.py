"""Core: dominio, contratos, caché local y configuración.

No conoce HTTP; los adaptadores dependen de él, nunca al revés.
"""

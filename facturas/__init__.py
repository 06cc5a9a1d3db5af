"""Facturador: facturas de autónomo guardadas como JSON en disco."""

__version__ = "0.1.0"

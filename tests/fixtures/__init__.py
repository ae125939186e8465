"""Importable modules used by the scanner and CLI tests."""

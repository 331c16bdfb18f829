"""Structurizr DSL language server: formatting and go-to-definition over stdio."""

__version__ = "1.0.0"

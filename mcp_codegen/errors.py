"""Exceptions raised by the code generator."""

from __future__ import annotations


class CodegenError(Exception):
    """Base class for generator errors."""


class ConfigurationError(CodegenError):
    """No usable tool source was configured (no command, URL or input file)."""


class UnsupportedSchemaError(CodegenError):
    """A schema uses a construct the zod backend cannot express.

    Raised per schema; the caller substitutes ``z.any()`` for that one
    declaration and keeps going.
    """

    def __init__(self, message: str, schema: object = None) -> None:
        super().__init__(message)
        self.schema = schema

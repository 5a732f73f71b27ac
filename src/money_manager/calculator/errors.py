"""Errors raised by calculator operations."""

from __future__ import annotations


class CalculatorError(Exception):
    pass


class InvalidInputError(CalculatorError, ValueError):
    pass


class NotInitializedError(CalculatorError, RuntimeError):
    pass


class EntitlementDeniedError(CalculatorError, PermissionError):
    pass

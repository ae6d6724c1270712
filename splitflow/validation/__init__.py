"""Validation package."""

from splitflow.validation.validator import PurchaseValidator

__all__ = ["PurchaseValidator"]

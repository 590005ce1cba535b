"""Base exception for workcal."""


class WorkcalError(Exception):
    """Base exception for all fatal workcal errors."""

    pass

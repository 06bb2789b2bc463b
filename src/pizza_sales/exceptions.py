"""
Typed failures raised by the pizza sales analytics engine.
"""


class AnalyticsError(Exception):
    """
    Base class for all analytics failures.

    Carries the operation that failed and, where known, the relation and
    key that triggered it.
    """

    def __init__(self, message, operation=None, table=None, key=None):
        self.operation = operation
        self.table = table
        self.key = key
        context = []
        if operation:
            context.append(f"operation={operation}")
        if table:
            context.append(f"table={table}")
        if key is not None:
            context.append(f"key={key!r}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class ReferentialIntegrityError(AnalyticsError):
    """A foreign key references a row that does not exist."""


class EmptyInputError(AnalyticsError):
    """An aggregate was requested over zero rows."""


class MalformedRowError(AnalyticsError):
    """A row fails basic type or range constraints."""

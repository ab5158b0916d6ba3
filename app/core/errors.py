"""Error taxonomy shared by the core and the HTTP layer"""


class ExplorerError(Exception):
    """Base error carrying the HTTP status it maps to"""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UnknownTableError(ExplorerError):
    """Raised when a table name is not in the catalog"""

    status_code = 404

    def __init__(self, table: str = ""):
        super().__init__("unknown table")
        self.table = table


class RecordNotFoundError(ExplorerError):
    """Raised when a single-record lookup matches no row"""

    status_code = 404

    def __init__(self):
        super().__init__("record not found")


class InvalidFieldTypeError(ExplorerError):
    """Raised when a value cannot be coerced into its field's kind"""

    status_code = 400

    def __init__(self, field: str, message: str = None):
        super().__init__(message or f"field {field} have invalid type")
        self.field = field


class FieldRequiredError(ExplorerError):
    """Raised when a create body omits a field with no default that is not nullable"""

    status_code = 400

    def __init__(self, field: str):
        super().__init__(f"field {field} is required")
        self.field = field


class InvalidRequestError(ExplorerError):
    """Raised for malformed path parameters or request bodies"""

    status_code = 400


class MethodNotAllowedError(ExplorerError):
    status_code = 405

    def __init__(self):
        super().__init__("method not allowed")


class StoreError(ExplorerError):
    """Raised when the backing store fails. The message stays server-side."""

    status_code = 500
    public_message = "internal server error"


class IntrospectionError(StoreError):
    """Raised when the schema catalog cannot be built"""
    pass


class SchemaDefinitionError(ValueError):
    """Raised when discovered metadata does not describe a servable table"""
    pass

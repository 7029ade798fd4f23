"""Domain-specific exceptions — framework-independent."""


class StoreUnavailableError(Exception):
    """Raised when a read against the record store fails."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Store unavailable during '{operation}': {detail}")


class StoreRejectionError(Exception):
    """Raised by a store adapter when an insert is refused.

    ``code`` is the backend's structured error code when it sends one
    (e.g. Postgres ``23505`` for a unique violation).
    """

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code
        super().__init__(f"[{code}] {message}" if code else message)


class AuthError(Exception):
    """Raised when the authentication provider refuses a request."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


# ── Submission errors ──


class SubmitError(Exception):
    """Base class for every reason a name submission can fail.

    ``user_message`` is what the form shows; all submit errors are terminal
    and never retried automatically.
    """

    user_message = "ERROR."

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.user_message)


class NoCountrySelectedError(SubmitError):
    user_message = "SELECCIONA UN PAIS."


class InvalidNameLengthError(SubmitError):
    """Raised when the normalized name is outside the accepted length range."""

    user_message = "NOMBRE: 2 A 60 CARACTERES."

    def __init__(self, length: int):
        self.length = length
        super().__init__(f"Name length {length} outside accepted range")


class InvalidDescriptionLengthError(SubmitError):
    user_message = "DESCRIPCION: MAX 200 CARACTERES."

    def __init__(self, length: int):
        self.length = length
        super().__init__(f"Description length {length} exceeds maximum")


class RestrictedNameError(SubmitError):
    """Raised when the store refuses a name that is on its restricted list."""

    user_message = "NOMBRE RESTRINGIDO. NO SE PUEDE AGREGAR."

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Name '{name}' is restricted")


class DuplicateNameError(SubmitError):
    """Raised when the name already exists in the target country."""

    user_message = "ESE NOMBRE YA EXISTE EN ESE PAIS. PRUEBA CON OTRO."

    def __init__(self, country_id: str, name: str):
        self.country_id = country_id
        self.name = name
        super().__init__(f"Name '{name}' already exists in country '{country_id}'")


class StoreError(SubmitError):
    """Catch-all for store failures that match no known marker; shown verbatim."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return f"ERROR: {self.message}"

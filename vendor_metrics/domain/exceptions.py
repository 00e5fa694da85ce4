"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AuthorizationError(DomainException):
    """Caller has no view scope for the requested report"""

    pass


class InvalidReportQueryError(DomainException):
    """Report parameters are malformed; `field` names the offending input"""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class LedgerReadError(DomainException):
    """Ledger store could not be read"""

    pass

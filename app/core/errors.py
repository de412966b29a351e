class CoverageError(Exception):
    status_code = 400
    code = "COVERAGE_ERROR"

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_detail(self) -> dict:
        return {"message": self.message, "code": self.code}


class PolicyNotFound(CoverageError):
    status_code = 404
    code = "POLICY_NOT_FOUND"


class PolicyNotActive(CoverageError):
    status_code = 409
    code = "POLICY_NOT_ACTIVE"


class PlanNotFound(CoverageError):
    status_code = 404
    code = "PLAN_NOT_FOUND"


class AlreadyActive(CoverageError):
    status_code = 409
    code = "COVERAGE_ALREADY_ACTIVE"


class AlreadyInactive(CoverageError):
    status_code = 409
    code = "COVERAGE_ALREADY_INACTIVE"


class CoverageCancelled(CoverageError):
    status_code = 409
    code = "COVERAGE_CANCELLED"


class InsufficientFunds(CoverageError):
    status_code = 400
    code = "INSUFFICIENT_FUNDS"


class UnauthorizedAccess(CoverageError):
    status_code = 403
    code = "UNAUTHORIZED_ACCESS"


class ActivePolicyExists(CoverageError):
    status_code = 409
    code = "ACTIVE_POLICY_EXISTS"


class ConcurrentModification(CoverageError):
    status_code = 409
    code = "CONCURRENT_MODIFICATION"


class WalletUnderflow(InsufficientFunds):
    code = "WALLET_UNDERFLOW"

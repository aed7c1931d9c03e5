class SecureScanError(Exception):
    """Base class for pipeline errors."""


class InvalidTarget(SecureScanError, ValueError):
    """The scan target could not be turned into a URL."""


class ProbeUnavailable(SecureScanError):
    """The probe provider could not be reached or returned garbage. No report is produced."""


class AdvisorError(SecureScanError):
    pass


class AdvisorUnavailable(AdvisorError):
    """Advisor unreachable, unauthenticated or timed out."""


class AdvisorMalformed(AdvisorError):
    """Advisor answered with something that is not the agreed structure."""


class RenderFailure(SecureScanError):
    pass

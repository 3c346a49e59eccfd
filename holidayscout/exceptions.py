"""
Custom exceptions for HolidayScout.

This module provides:
1. Base exception hierarchy for application-wide error handling
2. Informative exceptions with actionable guidance for configuration problems

Provider failures and missing offers are recovered inside the package
assembler. Only configuration errors and invalid requests reach the caller.
"""

from typing import Optional


# ============================================================================
# Base Exception Hierarchy
# ============================================================================


class HolidayScoutException(Exception):
    """Base exception class for all HolidayScout exceptions."""

    pass


class ProviderError(HolidayScoutException):
    """
    Raised when a transport or hotel provider fails.

    Covers network, authentication and rate-limit failures. The assembler
    catches it, counts it in the search statistics and skips the destination.

    Attributes:
        provider: Name of the failing provider
        reason: Human readable failure reason
        status_code: HTTP status code, if the failure came from an HTTP API
        recoverable: Whether retrying later may succeed
    """

    def __init__(
        self,
        provider: str,
        reason: str,
        status_code: Optional[int] = None,
        recoverable: bool = True,
    ):
        self.provider = provider
        self.reason = reason
        self.status_code = status_code
        self.recoverable = recoverable

        message = f"{provider} provider failed: {reason}"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        super().__init__(message)


class ConfigurationException(HolidayScoutException):
    """Exception raised for configuration errors."""

    pass


class InvalidSearchRequestError(HolidayScoutException, ValueError):
    """
    Raised when a search request is malformed.

    Rejected before orchestration starts, never mid-run.
    """

    def __init__(self, field: str, issue: str):
        self.field = field
        self.issue = issue
        super().__init__(f"Invalid search request: {field}: {issue}")


class DestinationNotFoundError(HolidayScoutException, LookupError):
    """Raised when a destination code is not in the reference data."""

    def __init__(self, iata_code: str):
        self.iata_code = iata_code
        super().__init__(f"Unknown destination: {iata_code}")


# ============================================================================
# Informative Exceptions with Actionable Guidance
# ============================================================================


class InformativeException(HolidayScoutException):
    """Base class for informative exceptions with actionable guidance."""

    def __init__(self, message: str, remediation: Optional[str] = None,
                 details: Optional[str] = None, commands: Optional[list[str]] = None):
        """
        Initialize an informative exception.

        Args:
            message: Clear explanation of what went wrong
            remediation: Specific remediation instructions
            details: Relevant configuration or context details
            commands: List of troubleshooting commands to try
        """
        self.message = message
        self.remediation = remediation
        self.details = details
        self.commands = commands or []

        full_message = f"\n{'=' * 80}\n"
        full_message += f"ERROR: {message}\n"

        if details:
            full_message += f"\nDETAILS:\n{details}\n"

        if remediation:
            full_message += f"\nHOW TO FIX:\n{remediation}\n"

        if commands:
            full_message += "\nTROUBLESHOOTING COMMANDS:\n"
            for cmd in commands:
                full_message += f"  $ {cmd}\n"

        full_message += f"{'=' * 80}\n"

        super().__init__(full_message)


class APIKeyMissingError(InformativeException, ConfigurationException):
    """Raised when a provider's credentials are missing."""

    def __init__(self, service: str, env_vars: list[str]):
        message = f"{service} credentials are required but not configured"

        details = "Environment variables: " + ", ".join(env_vars)

        remediation = f"""
1. Obtain API credentials from {service}
2. Add them to your .env file:
""".lstrip() + "\n".join(f"   {var}=..." for var in env_vars) + """
3. Or disable the provider and fall back to price estimates
        """.rstrip()

        commands = [f"echo '{var}=your_value_here' >> .env" for var in env_vars]
        commands.append("holidayscout config show")

        super().__init__(message, remediation, details, commands)


class ConfigurationError(InformativeException, ConfigurationException):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_item: str, expected: str, actual: str = ""):
        message = f"Invalid configuration for {config_item}"

        details = f"Expected: {expected}"
        if actual:
            details += f"\nActual: {actual}"

        remediation = """
1. Check your .env file for correct configuration
2. Ensure all required environment variables are set
3. Run 'holidayscout config show' to inspect the effective settings
        """.strip()

        commands = [
            "holidayscout config show",
        ]

        super().__init__(message, remediation, details, commands)

"""Protocols for dependency injection in the hierarchy tools."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ApiProtocol(Protocol):
    """Protocol for ERP backend clients."""

    def call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: Any = None,
    ) -> dict[str, Any]:
        """Invoke an API endpoint and return the decoded response envelope."""
        ...

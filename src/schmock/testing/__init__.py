"""Test utilities for code that talks to a schmock mock over HTTP.

    from schmock.testing import SchmockTransport
"""

from schmock.testing.transport import SchmockTransport, to_httpx_response

__all__ = [
    "SchmockTransport",
    "to_httpx_response",
]

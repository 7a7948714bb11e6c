"""Outbound header injection from the environment.

Any environment variable named ``S3_CLI_HTTP_<NAME>`` becomes an HTTP header
on every request the client sends:

    S3_CLI_HTTP_CF_Access_Client_Id=abc  ->  cf-access-client-id: abc

The name is lower-cased and, unless REPLACE_UNDERSCORES_WITH_DASHES=false,
underscores become dashes. The environment is read once at startup; the
resulting mapping is then applied to each request before it is signed.
"""

from typing import Any, Mapping

from r2cli.logging_utils import get_logger

HEADER_ENV_PREFIX = "S3_CLI_HTTP_"

logger = get_logger("headers")


def header_name_for(env_key: str, replace_underscores_with_dashes: bool = True) -> str:
    """Derive the header name for a prefixed environment key."""
    name = env_key[len(HEADER_ENV_PREFIX):].lower()
    if replace_underscores_with_dashes:
        name = name.replace("_", "-")
    return name


def collect_headers(
    environ: Mapping[str, str],
    replace_underscores_with_dashes: bool = True,
) -> dict[str, str]:
    """Build the header mapping from an environment snapshot.

    Args:
        environ: Environment mapping to scan.
        replace_underscores_with_dashes: Turn ``_`` into ``-`` in names.

    Returns:
        Mapping of header name to value, in environment order.
    """
    headers: dict[str, str] = {}
    for key, value in environ.items():
        if not key.startswith(HEADER_ENV_PREFIX) or value is None:
            continue
        headers[header_name_for(key, replace_underscores_with_dashes)] = value
    return headers


def apply_headers(request: Any, headers: Mapping[str, str]) -> Any:
    """Set each header on the request, replacing existing values.

    botocore's request headers behave like an email message, where item
    assignment appends, so an existing header is removed first.

    Returns:
        The same request, for chaining.
    """
    for name, value in headers.items():
        if name in request.headers:
            del request.headers[name]
        request.headers[name] = value
    return request


class HeaderInjector:
    """botocore event handler that adds the configured headers.

    Registered on ``before-sign.s3`` so the headers are part of the
    SigV4 signature.
    """

    def __init__(self, headers: Mapping[str, str]):
        self.headers = dict(headers)

    def __call__(self, request: Any, **kwargs: Any) -> None:
        for name, value in self.headers.items():
            logger.debug("Adding header: %s = %s", name, value)
        apply_headers(request, self.headers)

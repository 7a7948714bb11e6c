"""S3 client factory for the R2 command-line client.

Creates the single boto3 S3 client shared by every command, configured with
the custom endpoint, explicit credentials, path-style addressing and the
placeholder region ``auto``.

Checksum calculation is limited to operations that require it; newer
botocore releases otherwise attach CRC checksums that several S3-compatible
services reject.
"""

from typing import Mapping, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ProfileNotFound

from r2cli.headers import HeaderInjector
from r2cli.logging_utils import get_logger
from r2cli.models import CliConfig

# Region token accepted by R2 and ignored by most other S3-compatible services
DEFAULT_REGION = "auto"

# botocore event the header adapter is attached to
HEADER_EVENT = "before-sign.s3"

logger = get_logger("s3_client")


def build_s3_client(
    config: CliConfig,
    headers: Optional[Mapping[str, str]] = None,
):
    """Build the boto3 S3 client for the given configuration.

    Args:
        config: Loaded configuration with endpoint and credentials.
        headers: Extra headers to set on every outbound request.

    Returns:
        A boto3 S3 client.

    Note:
        When PROFILE is set the session is created from that profile, but
        the explicit keys from the configuration still take precedence. A
        profile missing from the AWS config files falls back to a plain
        session, since the keys are all the client needs.
    """
    boto_config = Config(
        signature_version="s3v4",
        s3={"addressing_style": "path"},
        request_checksum_calculation="when_required",
        response_checksum_validation="when_required",
    )

    client_kwargs = dict(
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.aws_access_key_id,
        aws_secret_access_key=config.aws_secret_access_key,
        region_name=DEFAULT_REGION,
        config=boto_config,
    )

    if config.profile:
        try:
            client = boto3.Session(profile_name=config.profile).client("s3", **client_kwargs)
        except ProfileNotFound:
            logger.warning("Profile %s not found, using configured keys only", config.profile)
            client = boto3.Session().client("s3", **client_kwargs)
    else:
        client = boto3.Session().client("s3", **client_kwargs)

    client.meta.events.register(HEADER_EVENT, HeaderInjector(headers or {}))

    return client

"""R2 command-line client.

A small client that maps shell invocations to single calls against an
S3-compatible object storage service such as Cloudflare R2.
"""

__version__ = "1.0.0"

from r2cli.cli import main

__all__ = ["main", "__version__"]

"""Multipart upload steps.

Each CLI invocation performs exactly one step of a multipart upload:
- Initiate upload
- Upload one part
- Complete upload from a parts file

Nothing is tracked between invocations. A failed or abandoned upload is
left as it is on the service; aborting it is up to the operator.
"""

import json
from typing import Any, Optional

# Top-level key of the parts file
PARTS_KEY = "Parts"


class PartsFileError(Exception):
    """Raised when a parts file cannot be used for completion."""

    pass


def load_parts(file_path: str) -> list[dict]:
    """Read the part list for a completion request.

    The file holds a JSON object of the form::

        {"Parts": [{"PartNumber": 1, "ETag": "\\"abc...\\""}, ...]}

    Parts are returned in file order. Duplicates are kept; the service
    decides whether the list is acceptable.

    Args:
        file_path: Path to the JSON parts file.

    Returns:
        List of {"PartNumber", "ETag"} dicts.

    Raises:
        PartsFileError: If the file is not valid JSON or an entry is missing
                        PartNumber or ETag.
        OSError: If the file cannot be read.
    """
    with open(file_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise PartsFileError(f"Invalid JSON in parts file {file_path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get(PARTS_KEY), list):
        raise PartsFileError(
            f"Parts file {file_path} must contain a '{PARTS_KEY}' list"
        )

    parts: list[dict] = []
    for index, entry in enumerate(data[PARTS_KEY]):
        if not isinstance(entry, dict) or "PartNumber" not in entry or "ETag" not in entry:
            raise PartsFileError(
                f"Entry {index} in {file_path} needs both PartNumber and ETag"
            )
        try:
            part_number = int(entry["PartNumber"])
        except (TypeError, ValueError) as e:
            raise PartsFileError(
                f"Entry {index} in {file_path} has a non-integer PartNumber"
            ) from e
        parts.append({"PartNumber": part_number, "ETag": entry["ETag"]})

    return parts


class MultipartUpload:
    """One multipart upload on a bucket/key pair.

    Wraps the three service calls a multipart upload is made of. The upload
    ID is either returned by initiate() or supplied by the caller when
    resuming an upload started by an earlier invocation.
    """

    def __init__(
        self,
        s3_client: Any,
        bucket: str,
        key: str,
        upload_id: Optional[str] = None,
    ):
        """Initialize the multipart upload.

        Args:
            s3_client: boto3 S3 client
            bucket: Target bucket
            key: Target object key
            upload_id: Existing upload ID, if the upload was already initiated
        """
        self.s3_client = s3_client
        self.bucket = bucket
        self.key = key
        self.upload_id = upload_id

    def initiate(self) -> str:
        """Initiate a new multipart upload.

        Returns:
            The upload ID for the new multipart upload.
        """
        response = self.s3_client.create_multipart_upload(
            Bucket=self.bucket,
            Key=self.key,
        )
        self.upload_id = response["UploadId"]
        return self.upload_id

    def upload_part(self, part_number: int, file_path: str) -> str:
        """Upload a whole file as one part.

        The open file is handed to botocore as the body, so it is streamed
        rather than read into memory here.

        Returns:
            The ETag of the uploaded part.

        Raises:
            RuntimeError: If no upload ID is known.
        """
        if self.upload_id is None:
            raise RuntimeError("Upload not initiated")

        with open(file_path, "rb") as body:
            response = self.s3_client.upload_part(
                Bucket=self.bucket,
                Key=self.key,
                PartNumber=part_number,
                UploadId=self.upload_id,
                Body=body,
            )
        return response["ETag"]

    def complete(self, parts: list[dict]) -> dict:
        """Complete the multipart upload with the given parts, in order.

        Returns:
            The API response.

        Raises:
            RuntimeError: If no upload ID is known.
        """
        if self.upload_id is None:
            raise RuntimeError("Upload not initiated")

        return self.s3_client.complete_multipart_upload(
            Bucket=self.bucket,
            Key=self.key,
            UploadId=self.upload_id,
            MultipartUpload={PARTS_KEY: parts},
        )

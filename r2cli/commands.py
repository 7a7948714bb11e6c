"""Command handlers.

Each handler turns one parsed argparse namespace into a single service call
(count-objects issues one call per listing page) and reports the result.
Errors are not handled here; they propagate to cli.main, which reports them
the same way for every command.
"""

import os
from typing import Any, Callable

from r2cli.listing import fetch_page, iterate_pages, running_totals
from r2cli.multipart import MultipartUpload, load_parts
from r2cli.reporter import ConsoleReporter


class CommandError(Exception):
    """Raised when a command's local inputs are unusable."""

    pass


def create_multipart_upload(s3_client: Any, args, reporter: ConsoleReporter) -> None:
    upload = MultipartUpload(s3_client, args.bucket, args.key)
    upload_id = upload.initiate()
    reporter.message(f"Multipart upload created: {upload_id}")


def upload_part(s3_client: Any, args, reporter: ConsoleReporter) -> None:
    upload = MultipartUpload(s3_client, args.bucket, args.key, upload_id=args.upload_id)
    etag = upload.upload_part(args.part_number, args.file)
    reporter.message(f"Part uploaded: {etag}")


def complete_multipart_upload(s3_client: Any, args, reporter: ConsoleReporter) -> None:
    parts = load_parts(args.file)
    upload = MultipartUpload(s3_client, args.bucket, args.key, upload_id=args.upload_id)
    upload.complete(parts)
    reporter.message("Multipart upload completed")


def put_object(s3_client: Any, args, reporter: ConsoleReporter) -> None:
    """Upload a file as a single object with an explicit Content-Length."""
    if not os.path.isfile(args.file):
        raise CommandError(f"File not found: {args.file}")

    size = os.path.getsize(args.file)
    with open(args.file, "rb") as body:
        response = s3_client.put_object(
            Bucket=args.bucket,
            Key=args.key,
            Body=body,
            ContentLength=size,
        )

    reporter.message("Object uploaded successfully")
    reporter.message(f"ETag: {response.get('ETag')}")


def delete_object(s3_client: Any, args, reporter: ConsoleReporter) -> None:
    s3_client.delete_object(Bucket=args.bucket, Key=args.key)
    reporter.message("Object deleted")


def create_bucket(s3_client: Any, args, reporter: ConsoleReporter) -> None:
    s3_client.create_bucket(Bucket=args.bucket)
    reporter.message(f'Bucket "{args.bucket}" created')


def list_objects(s3_client: Any, args, reporter: ConsoleReporter) -> None:
    """Print the entries of the first listing page only."""
    page = fetch_page(s3_client, args.bucket, args.prefix)
    for obj in page.objects:
        reporter.entry(obj)


def count_objects(s3_client: Any, args, reporter: ConsoleReporter) -> None:
    """Count every object under the prefix, following continuation tokens."""
    total = 0
    for total in running_totals(iterate_pages(s3_client, args.bucket, args.prefix)):
        reporter.progress(f"Current count: {total}")
    reporter.end_progress()

    reporter.message("Final count:")
    reporter.message(f"Total objects in bucket: {total}")


# Subcommand name -> handler
COMMANDS: dict[str, Callable[[Any, Any, ConsoleReporter], None]] = {
    "create-multipart-upload": create_multipart_upload,
    "upload-part": upload_part,
    "complete-multipart-upload": complete_multipart_upload,
    "put-object": put_object,
    "delete-object": delete_object,
    "create-bucket": create_bucket,
    "list-objects": list_objects,
    "count-objects": count_objects,
}

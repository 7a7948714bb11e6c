"""Paged object listing.

Wraps ListObjectsV2 as a lazy sequence of pages. Each page carries the
objects it returned and the continuation token for the next request, so
callers decide how much of the bucket to walk:

- list-objects takes the first page only
- count-objects consumes every page and sums the counts
"""

from typing import Any, Generator, Optional

from r2cli.models import ListPage


def list_request_params(
    bucket: str,
    prefix: Optional[str] = None,
    continuation_token: Optional[str] = None,
) -> dict[str, Any]:
    """Build ListObjectsV2 parameters, leaving out unset values."""
    params: dict[str, Any] = {"Bucket": bucket}
    if prefix is not None:
        params["Prefix"] = prefix
    if continuation_token is not None:
        params["ContinuationToken"] = continuation_token
    return params


def fetch_page(
    s3_client: Any,
    bucket: str,
    prefix: Optional[str] = None,
    continuation_token: Optional[str] = None,
) -> ListPage:
    """Issue one ListObjectsV2 request and wrap the response."""
    response = s3_client.list_objects_v2(
        **list_request_params(bucket, prefix, continuation_token)
    )
    return ListPage(
        objects=response.get("Contents", []),
        next_token=response.get("NextContinuationToken"),
    )


def iterate_pages(
    s3_client: Any,
    bucket: str,
    prefix: Optional[str] = None,
    start_token: Optional[str] = None,
) -> Generator[ListPage, None, None]:
    """Iterate over listing pages until no continuation token is returned.

    Requests are issued lazily, one per page, strictly in sequence.

    Args:
        s3_client: boto3 S3 client.
        bucket: Bucket to list.
        prefix: Optional key prefix, passed to the service unchanged.
        start_token: Continuation token to resume from.

    Yields:
        ListPage for each response.
    """
    token = start_token
    while True:
        page = fetch_page(s3_client, bucket, prefix, token)
        yield page
        if not page.next_token:
            break
        token = page.next_token


def running_totals(pages) -> Generator[int, None, None]:
    """Fold pages into a running object count, yielding after each page."""
    total = 0
    for page in pages:
        total += page.count
        yield total

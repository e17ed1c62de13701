"""Shared helpers for code that talks to boto3 clients.

- item iteration over paginated describe calls (real paginators or fakes)
- ClientError code extraction
- region extraction from clients and ARNs
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from botocore.exceptions import ClientError


def client_error_code(exc: ClientError) -> str:
    try:
        return str(exc.response.get("Error", {}).get("Code") or "")
    except (AttributeError, TypeError, ValueError):
        return ""


def safe_region_from_client(client: Any) -> str:
    """Best-effort region name extraction from a boto3 client."""

    return str(getattr(getattr(client, "meta", None), "region_name", "") or "")


def arn_region(arn: str) -> str:
    """Return the region component of an ARN (or empty string)."""

    # arn:partition:service:region:account:resource
    parts = str(arn or "").strip().split(":")
    if len(parts) >= 6 and parts[0] == "arn":
        return parts[3]
    return ""


def _items(pages: Iterable[Mapping[str, Any]], result_key: str) -> Iterator[dict[str, Any]]:
    for page in pages:
        for item in page.get(result_key, []) or []:
            if isinstance(item, dict):
                yield item


def _token_pages(
    call: Any,
    params: Mapping[str, Any],
    request_token_key: str,
    response_token_keys: Sequence[str],
) -> Iterator[Mapping[str, Any]]:
    token = ""
    while True:
        req = dict(params)
        if token:
            req[request_token_key] = token
        page = call(**req)
        yield page
        token = next((str(page[k]) for k in response_token_keys if page.get(k)), "")
        if not token:
            return


def paginate_items(
    client: Any,
    operation: str,
    result_key: str,
    *,
    params: Mapping[str, Any] | None = None,
    request_token_key: str = "NextToken",
    response_token_keys: Sequence[str] = ("NextToken",),
) -> Iterator[dict[str, Any]]:
    """Yield the dict items under ``result_key`` across every page of ``operation``.

    The client's paginator is used when it has one for ``operation``.
    Otherwise the operation is called directly, passing the token found under
    ``response_token_keys`` back as ``request_token_key`` (ELBv2 describe
    calls use ``Marker``/``NextMarker``).
    """
    params = dict(params or {})

    paginator = None
    if hasattr(client, "get_paginator"):
        try:
            paginator = client.get_paginator(operation)
        except (AttributeError, KeyError, TypeError, ValueError):
            paginator = None
    if paginator is not None:
        yield from _items(paginator.paginate(**params), result_key)
        return

    call = getattr(client, operation, None)
    if call is None:
        raise AttributeError(f"client has no operation {operation}")
    yield from _items(_token_pages(call, params, request_token_key, response_token_keys), result_key)

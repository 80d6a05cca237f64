#
# Copyright (c) 2026 MongoDB Inc.
# Author: Benjamin Lorenz <benjamin.lorenz@mongodb.com>
#

"""
SERVER: Archethic UCO Price Oracle
Fetches the latest UCO price (USD and EUR) from the Archethic network oracle.
Use this for UCO price checks, Archethic market queries, and oracle data.
"""

import json
import logging
import math
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

import requests
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent

ARCHETHIC_API_URL = "https://mainnet.archethic.net/api"
UCO_PRICE_QUERY = """
  query {
    oracleData {
      timestamp
      services {
        uco {
          eur
          usd
        }
      }
    }
  }
"""
REQUEST_TIMEOUT = 10

SERVER_NAME = "Archethic UCO Price Oracle"
TOOL_NAME = "getUcoPrice"
TOOL_DESCRIPTION = "Fetches the latest UCO price (USD and EUR) from the Archethic network oracle"
SOURCE_NAME = "Archethic Oracle"
ASSET = "UCO"

LOG_PREFIX = "Error fetching Archethic UCO price:"

mcp = FastMCP(SERVER_NAME)

logging.basicConfig(
    level=logging.ERROR,
    format='%(levelname)s - %(name)s - %(message)s'
)
logger = logging.getLogger("uco_price")


@dataclass(frozen=True)
class OracleConfig:
    api_url: str = ARCHETHIC_API_URL
    query: str = UCO_PRICE_QUERY
    timeout: float = REQUEST_TIMEOUT


DEFAULT_CONFIG = OracleConfig()


@dataclass(frozen=True)
class PriceQuote:
    """UCO price as published by the oracle at `timestamp` (Unix seconds)."""
    timestamp: int
    usd: float
    eur: float


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    PARSE_ERROR = "parse_error"
    UPSTREAM_ERROR = "upstream_error"
    INVALID_STRUCTURE = "invalid_structure"


@dataclass(frozen=True)
class FetchFailure:
    kind: FailureKind
    message: str
    cause: Optional[BaseException] = None
    detail: Any = None


FetchResult = Union[PriceQuote, FetchFailure]

_ORACLE_PATH = ("data", "oracleData", "services", "uco")


def _fail(kind: FailureKind, message: str, cause=None, detail=None) -> FetchFailure:
    """Log a failed fetch and wrap it as a result"""
    logger.error("%s %s", LOG_PREFIX, message, exc_info=cause)
    return FetchFailure(kind=kind, message=message, cause=cause, detail=detail)


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _extract_quote(payload) -> FetchResult:
    """
    Walks data.oracleData.services.uco one level at a time.
    Returns the quote, or a failure naming the first missing field.
    """
    node = payload
    walked = []
    for key in _ORACLE_PATH:
        walked.append(key)
        node = node.get(key) if isinstance(node, dict) else None
        if not isinstance(node, dict):
            return _invalid(".".join(walked))

    oracle_data = payload["data"]["oracleData"]
    timestamp = oracle_data.get("timestamp")
    if not _is_number(timestamp):
        return _invalid("data.oracleData.timestamp")

    for currency in ("usd", "eur"):
        if not _is_number(node.get(currency)):
            return _invalid(f"data.oracleData.services.uco.{currency}")

    return PriceQuote(timestamp=timestamp, usd=node["usd"], eur=node["eur"])


def _invalid(path: str) -> FetchFailure:
    return _fail(
        FailureKind.INVALID_STRUCTURE,
        f"Invalid response structure from Archethic API (missing {path})",
        detail=path,
    )


def fetch_uco_price(session: Optional[requests.Session] = None,
                    config: OracleConfig = DEFAULT_CONFIG) -> FetchResult:
    """
    Fetches the latest UCO price data from the Archethic GraphQL API.

    Never raises for network, HTTP, decoding or shape problems: those come
    back as a FetchFailure (already logged) so callers can branch on the
    result type.
    """
    http = session or requests
    try:
        resp = http.post(
            config.api_url,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            data=json.dumps({"query": config.query}),
            timeout=config.timeout,
        )
    except requests.RequestException as e:
        return _fail(FailureKind.TRANSPORT, str(e), cause=e)

    if not 200 <= resp.status_code < 300:
        return _fail(
            FailureKind.HTTP_STATUS,
            f"HTTP error! status: {resp.status_code}",
            detail=resp.status_code,
        )

    try:
        payload = resp.json()
    except ValueError as e:
        return _fail(FailureKind.PARSE_ERROR, f"Invalid JSON in response: {e}", cause=e)

    if not isinstance(payload, dict):
        return _invalid("data")

    errors = payload.get("errors")
    if errors:
        if not isinstance(errors, list):
            errors = [errors]
        messages = [
            err.get("message", str(err)) if isinstance(err, dict) else str(err)
            for err in errors
        ]
        return _fail(
            FailureKind.UPSTREAM_ERROR,
            f"GraphQL error: {'; '.join(messages)}",
            detail=messages,
        )

    return _extract_quote(payload)


def to_iso8601(timestamp) -> str:
    """Unix seconds -> '2023-11-14T22:13:20.000Z'"""
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_quote(quote: PriceQuote) -> dict:
    return {
        "source": SOURCE_NAME,
        "asset": ASSET,
        "price_usd": quote.usd,
        "price_eur": quote.eur,
        "timestamp": to_iso8601(quote.timestamp),
        "raw_timestamp": quote.timestamp,
    }


def build_tool_result(result: FetchResult) -> CallToolResult:
    """Turns a fetch result into exactly one MCP success or error envelope"""
    if isinstance(result, PriceQuote):
        try:
            text = json.dumps(format_quote(result), allow_nan=False)
        except (ValueError, OverflowError, OSError) as e:
            # oracle timestamps are not range-checked; datetime tops out at year 9999
            message = f"Unrepresentable oracle timestamp {result.timestamp}: {e}"
            logger.error("%s %s", LOG_PREFIX, message, exc_info=e)
            return _error_result(message)
        return CallToolResult(content=[TextContent(type="text", text=text)])
    return _error_result(result.message)


def _error_result(message: str) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=f"Error fetching UCO price: {message}")],
        isError=True,
    )


@mcp.resource("oracle://disclaimer")
def get_disclaimer() -> str:
    """Legal disclaimer for oracle price data"""
    return (
        "DISCLAIMER: This is not financial advice. "
        "UCO prices come from the Archethic oracle and may lag the market."
    )


@mcp.resource("config://endpoint")
def get_endpoint() -> str:
    """Returns the oracle endpoint queried by this server"""
    return DEFAULT_CONFIG.api_url


@mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
def get_uco_price() -> CallToolResult:
    """
    Fetches the latest UCO price (USD and EUR) from the Archethic network oracle.
    Use this for UCO, Archethic, or oracle price queries.
    """
    return build_tool_result(fetch_uco_price())


def main() -> int:
    print(f"{SERVER_NAME} MCP Server running on stdio", file=sys.stderr)
    try:
        mcp.run()
    except Exception:
        logger.exception("Fatal error in main()")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

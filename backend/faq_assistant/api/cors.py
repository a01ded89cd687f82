"""Permissive CORS headers for explicit preflight routes."""

from __future__ import annotations

from fastapi import Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def preflight_response() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)

"""
Request context helpers for audit records
"""

from fastapi import Request

UNKNOWN = "unknown"


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, else the peer address"""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop

    client_host = getattr(request.client, "host", None)
    return client_host or UNKNOWN


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent") or UNKNOWN

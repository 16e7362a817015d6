"""Content-Security-Policy construction and per-request nonces.

A fresh nonce is generated for every HTML response. It is stamped into the
policy (script-src / style-src) and handed to templates via the ``x-nonce``
response header and ``request.state.csp_nonce`` so inline tags can carry it.

The policy itself is a pure function of ``CSPConfig``; directive order is
fixed so rendered policies are diffable.
"""

import base64
import secrets
from dataclasses import dataclass

CSP_HEADER = "Content-Security-Policy"
CSP_REPORT_ONLY_HEADER = "Content-Security-Policy-Report-Only"
CSP_NONCE_HEADER = "x-nonce"
CSP_REPORT_URI = "/api/csp-report"

NONCE_BYTES = 16

# Cloudflare Web Analytics: beacon script + collection endpoint
ANALYTICS_SCRIPT_HOST = "https://static.cloudflareinsights.com"
ANALYTICS_CONNECT_HOST = "https://cloudflareinsights.com"
OWN_DOMAIN_WILDCARD = "https://*.whitehatlink.org"
FONTS_CSS_HOST = "https://fonts.googleapis.com"
FONTS_STATIC_HOST = "https://fonts.gstatic.com"


@dataclass(frozen=True)
class CSPConfig:
    """Inputs of a single policy render.

    Attributes:
        nonce: Per-request nonce, or None to render a nonce-less policy
        is_development: Allows eval and websocket hot reload, drops upgrade-insecure-requests
        is_payload_admin: Back-office pages need inline scripts and eval
    """

    nonce: str | None = None
    is_development: bool = False
    is_payload_admin: bool = False


def generate_nonce() -> str:
    """Generate a 24-character base64 nonce from 16 secure random bytes.

    Errors from the OS random source propagate: a predictable nonce would
    void the whole policy, so there is no fallback.
    """
    return base64.b64encode(secrets.token_bytes(NONCE_BYTES)).decode("ascii")


def build_directives(config: CSPConfig) -> dict[str, list[str]]:
    """Build the ordered directive -> sources mapping for a policy.

    A directive with an empty source list is a bare flag
    (upgrade-insecure-requests, block-all-mixed-content).
    """
    nonce_source = [f"'nonce-{config.nonce}'"] if config.nonce else []

    script_src = ["'self'", *nonce_source, "'strict-dynamic'", ANALYTICS_SCRIPT_HOST]
    if config.is_development:
        script_src.append("'unsafe-eval'")
    if config.is_payload_admin:
        script_src += ["'unsafe-inline'", "'unsafe-eval'"]

    connect_src = ["'self'", OWN_DOMAIN_WILDCARD, ANALYTICS_CONNECT_HOST]
    if config.is_development:
        connect_src += ["ws:", "wss:"]

    directives: dict[str, list[str]] = {
        "default-src": ["'self'"],
        "script-src": script_src,
        # Components ship inline style attributes; nonce covers <style> blocks
        "style-src": ["'self'", *nonce_source, FONTS_CSS_HOST, "'unsafe-inline'"],
        "font-src": ["'self'", FONTS_STATIC_HOST, "data:"],
        # Inventory and blog images can come from any HTTPS origin
        "img-src": ["'self'", "data:", "blob:", "https:"],
        "connect-src": connect_src,
        "media-src": ["'self'", "blob:"],
        "object-src": ["'none'"],
        "frame-src": ["'none'"],
        "frame-ancestors": ["'none'"],
        "base-uri": ["'self'"],
        "form-action": ["'self'"],
    }
    if not config.is_development:
        directives["upgrade-insecure-requests"] = []
    directives["block-all-mixed-content"] = []
    directives["worker-src"] = ["'self'", "blob:"]
    directives["manifest-src"] = ["'self'"]
    return directives


def serialize_policy(directives: dict[str, list[str]]) -> str:
    """Render directives as ``name src src; name2 ...`` without a trailing semicolon."""
    return "; ".join(
        f"{name} {' '.join(sources)}" if sources else name
        for name, sources in directives.items()
    )


def build_csp(config: CSPConfig) -> str:
    """Build the Content-Security-Policy header value.

    Args:
        config: Nonce and environment flags for this request

    Returns:
        Policy string; identical configs always render identical strings

    Examples:
        >>> build_csp(CSPConfig()).split("; ")[0]
        "default-src 'self'"
    """
    return serialize_policy(build_directives(config))


def build_csp_report_only(config: CSPConfig) -> str:
    """Same policy as build_csp, reporting violations to the CSP report endpoint.

    Meant for the Content-Security-Policy-Report-Only header, to trial a
    policy change without enforcing it.
    """
    return f"{build_csp(config)}; report-uri {CSP_REPORT_URI}"

"""URL canonicalization and security headers middleware.

Runs once per request, before any route:

1. Non-canonical paths (trailing slash, repeated slashes, uppercase outside
   the admin panel) get a single 308 redirect to the canonical URL.
2. Every other response gets a fresh CSP nonce and the full security
   header set. Redirects carry none of it: the browser re-requests anyway.
"""

import re
from dataclasses import dataclass
from urllib.parse import quote

from starlette.datastructures import URL
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from whitehatlink.api.config import Settings
from whitehatlink.api.csp import (
    CSP_HEADER,
    CSP_NONCE_HEADER,
    CSP_REPORT_ONLY_HEADER,
    CSPConfig,
    build_csp,
    build_csp_report_only,
    generate_nonce,
)
from whitehatlink.monitoring import get_logger

log = get_logger(__name__)

# Static assets, image transforms, favicon and raw image files skip the middleware
EXCLUDED_PATHS = re.compile(
    r"^/(?:static/|_image|favicon\.ico$)|\.(?:svg|png|jpg|jpeg|gif|webp|ico)$",
    re.IGNORECASE,
)

_SLASH_RUN = re.compile(r"/{2,}")

# RFC 3986 pchar minus '%': decoded paths are re-encoded for the Location header
_PATH_SAFE = "/!$&'()*+,;=:@-._~"

HSTS_VALUE = "max-age=31536000; includeSubDomains; preload"
PERMISSIONS_POLICY = "camera=(), microphone=(), geolocation=(), interest-cohort=()"


@dataclass(frozen=True)
class CanonicalPath:
    """Canonical form of a request path and whether it differs from the input."""

    normalized_path: str
    changed: bool


def _strip_trailing_slash(path: str) -> str:
    if path != "/" and path.endswith("/"):
        return path[:-1]
    return path


def canonicalize_path(path: str, admin_prefix: str = "/admin") -> CanonicalPath:
    """Reduce a decoded request path to its canonical form.

    Rules, applied in order:
        - strip one trailing slash (root "/" is kept)
        - collapse runs of slashes into one, then strip a trailing slash again
        - lowercase, unless the path lives under ``admin_prefix``

    Args:
        path: Decoded URL path as parsed by the server
        admin_prefix: Prefix of case-sensitive back-office routes

    Returns:
        CanonicalPath; ``changed`` is True when a redirect is needed

    Raises:
        ValueError: If the path is not an absolute path

    Examples:
        >>> canonicalize_path("/BLOG//My-Post/")
        CanonicalPath(normalized_path='/blog/my-post', changed=True)
        >>> canonicalize_path("/admin/Dashboard")
        CanonicalPath(normalized_path='/admin/Dashboard', changed=False)
    """
    if not path.startswith("/"):
        raise ValueError(f"not an absolute path: {path!r}")

    new_path = _strip_trailing_slash(path)

    # "/a//" only loses one slash above; strip again after the collapse
    new_path = _strip_trailing_slash(_SLASH_RUN.sub("/", new_path))

    if not new_path.startswith(admin_prefix) and new_path != new_path.lower():
        new_path = new_path.lower()

    return CanonicalPath(normalized_path=new_path, changed=new_path != path)


def build_redirect_url(url: URL, path: str) -> str:
    """Absolute redirect target: same scheme and host, new path, original query."""
    location = f"{url.scheme}://{url.netloc}{quote(path, safe=_PATH_SAFE)}"
    if url.query:
        location += f"?{url.query}"
    return location


def security_headers(
    nonce: str,
    is_development: bool,
    is_payload_admin: bool,
    report_only: bool = False,
) -> dict[str, str]:
    """Ordered security header set for a non-redirect response.

    Args:
        nonce: The nonce rendered into the CSP for this response
        is_development: Development mode (relaxed CSP, no HSTS)
        is_payload_admin: Request targets the admin panel
        report_only: Also emit a Report-Only policy with a report-uri

    Returns:
        Header name -> value, in emission order
    """
    config = CSPConfig(
        nonce=nonce,
        is_development=is_development,
        is_payload_admin=is_payload_admin,
    )
    headers = {
        CSP_NONCE_HEADER: nonce,
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "X-XSS-Protection": "1; mode=block",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Permissions-Policy": PERMISSIONS_POLICY,
        CSP_HEADER: build_csp(config),
    }
    if report_only:
        headers[CSP_REPORT_ONLY_HEADER] = build_csp_report_only(config)
    # HTTPS is only guaranteed outside development
    if not is_development:
        headers["Strict-Transport-Security"] = HSTS_VALUE
    return headers


def get_csp_nonce(request: Request) -> str:
    """Nonce generated for this request, for stamping inline <script>/<style> tags."""
    return getattr(request.state, "csp_nonce", "")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Canonicalize URLs and attach CSP + security headers.

    Settings are injected at construction time; the middleware reads
    nothing but the request and those settings.
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings

    def _canonical(self, request: Request) -> CanonicalPath | None:
        try:
            return canonicalize_path(request.url.path, self.settings.admin_path_prefix)
        except ValueError as e:
            # Canonical URLs are cosmetic: let the request through
            log.warning(
                "canonicalization_skipped",
                raw_path=repr(request.scope.get("raw_path")),
                error=str(e),
            )
            return None

    async def dispatch(self, request: Request, call_next) -> Response:
        """Redirect to the canonical URL or add security headers to the response."""
        if EXCLUDED_PATHS.search(request.scope.get("path", "")):
            return await call_next(request)

        canonical = self._canonical(request)
        if canonical is not None and canonical.changed:
            location = build_redirect_url(request.url, canonical.normalized_path)
            # 308 keeps the method; location is already encoded and sent verbatim
            return Response(status_code=308, headers={"location": location})

        nonce = generate_nonce()
        request.state.csp_nonce = nonce

        path = canonical.normalized_path if canonical is not None else request.scope.get("path", "")
        is_payload_admin = path.startswith(self.settings.admin_path_prefix)

        response = await call_next(request)

        for name, value in security_headers(
            nonce,
            is_development=self.settings.is_development,
            is_payload_admin=is_payload_admin,
            report_only=self.settings.csp_report_only,
        ).items():
            response.headers[name] = value

        return response

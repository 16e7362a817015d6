"""robots.txt and sitemap.xml."""

from datetime import date, datetime, timezone
from xml.sax.saxutils import escape

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from whitehatlink.api.deps import SettingsDep

router = APIRouter(tags=["seo"])

# Static pages change with deploys, the home page and inventory with every import
BUILD_DATE = date(2025, 1, 15)

# (path, change frequency, priority, follows inventory updates)
STATIC_ROUTES: list[tuple[str, str, float, bool]] = [
    ("/", "daily", 1.0, True),
    ("/inventory", "hourly", 0.95, True),
    ("/services", "weekly", 0.85, False),
    ("/pricing", "weekly", 0.85, False),
    ("/blog", "daily", 0.8, True),
    ("/about", "monthly", 0.7, False),
    ("/contact", "monthly", 0.7, False),
    ("/faq", "monthly", 0.6, False),
    ("/privacy", "yearly", 0.3, False),
    ("/terms", "yearly", 0.3, False),
]


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots(settings: SettingsDep):
    host = settings.site_url.rstrip("/")
    return "\n".join(
        [
            "User-agent: *",
            "Allow: /",
            f"Disallow: {settings.admin_path_prefix}",
            "Disallow: /api",
            "",
            f"Host: {host}",
            f"Sitemap: {host}/sitemap.xml",
            "",
        ]
    )


@router.get("/sitemap.xml")
async def sitemap(settings: SettingsDep):
    host = settings.site_url.rstrip("/")
    today = datetime.now(timezone.utc).date()

    urls = []
    for path, changefreq, priority, live in STATIC_ROUTES:
        # Canonical URLs have no trailing slash, except the root
        loc = host + ("" if path == "/" else path)
        lastmod = today if live else BUILD_DATE
        urls.append(
            "<url>"
            f"<loc>{escape(loc or host)}</loc>"
            f"<lastmod>{lastmod.isoformat()}</lastmod>"
            f"<changefreq>{changefreq}</changefreq>"
            f"<priority>{priority:.2f}</priority>"
            "</url>"
        )

    body = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        + "".join(urls)
        + "</urlset>\n"
    )
    return Response(content=body, media_type="application/xml")

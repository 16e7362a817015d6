"""Normalization of scraped publisher records into InventoryItem objects.

The scraper exports one JSON object per site with loosely typed metrics
("1,234", "1%", "Yes", emoji flags for countries). Everything passes
through ``transform_record`` before it is stored.

Pricing: the scraped price is the wholesale placement price; the catalog
price is twice that, rounded half up to whole dollars.
"""

import math
import re
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from whitehatlink.inventory.models import InventoryItem
from whitehatlink.monitoring import get_logger

log = get_logger(__name__)

PRICE_MARKUP = 2
MAX_SAMPLE_URLS = 5

# First match wins; order matters ("fitness" is Health before Sports)
_DOMAIN_NICHES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"crypto|blockchain|bitcoin|defi|web3|nft|coin"), "Crypto"),
    (re.compile(r"financ|bank|loan|credit|invest|fund|stock|forex|money"), "Finance"),
    (re.compile(r"health|medic|clinic|wellness|fitness|care|pharma|hospital|doctor"), "Health"),
    (re.compile(r"saas|software.*service"), "SaaS"),
    (re.compile(r"tech|ai\b|data|cloud|dev|code|app|software|digital|cyber"), "Tech"),
    (re.compile(r"marketing|seo|advertis|brand|media|agency"), "Marketing"),
    (re.compile(r"travel|tour|hotel|flight|vacation|trip"), "Travel"),
    (re.compile(r"fashion|style|beauty|cosmetic|makeup"), "Fashion"),
    (re.compile(r"food|recipe|restaurant|cook|cuisine|dining"), "Food"),
    (re.compile(r"sport|athlet|fitness|gym|yoga|soccer|football|basketball"), "Sports"),
    (re.compile(r"edu|learn|course|academ|tutor|school|university"), "Education"),
    (re.compile(r"game|gaming|esport|play|gamer"), "Gaming"),
    (re.compile(r"legal|law|lawyer|attorney|court|justice"), "Legal"),
    (re.compile(r"real.*estate|property|realty|housing|home"), "Real Estate"),
    (re.compile(r"business|entrepreneur|startup|company|enterprise"), "Business"),
]

_SAMPLE_URL_NICHES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"crypto|blockchain|bitcoin"), "Crypto"),
    (re.compile(r"saas|software.*as.*service"), "SaaS"),
    (re.compile(r"health|medical|wellness"), "Health"),
    (re.compile(r"marketing|seo|digital.*marketing"), "Marketing"),
    (re.compile(r"finance|invest|trading"), "Finance"),
]

_GENERIC_PUBLISHER = re.compile(r"news|blog|media|magazine|journal|post|bulletin|press")

_COUNTRIES: list[tuple[str, re.Pattern, str]] = [
    ("\U0001F1FA\U0001F1F8", re.compile(r"\bUS(A)?\b|United States", re.IGNORECASE), "USA"),
    ("\U0001F1EC\U0001F1E7", re.compile(r"\bUK\b|United Kingdom", re.IGNORECASE), "UK"),
    ("\U0001F1E8\U0001F1E6", re.compile(r"Canada", re.IGNORECASE), "Canada"),
    ("\U0001F1E6\U0001F1FA", re.compile(r"Australia", re.IGNORECASE), "Australia"),
    ("\U0001F1E9\U0001F1EA", re.compile(r"Germany|\bDE\b", re.IGNORECASE), "Germany"),
    ("\U0001F1EB\U0001F1F7", re.compile(r"France|\bFR\b", re.IGNORECASE), "France"),
    ("\U0001F1EE\U0001F1F3", re.compile(r"India|\bIN\b"), "India"),
]


def parse_number(value: Any) -> float | None:
    """Parse a loosely formatted metric into a number.

    Examples:
        >>> parse_number("12,345")
        12345.0
        >>> parse_number("$1.5k") is None
        False
        >>> parse_number("n/a") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    if not isinstance(value, str):
        return None
    cleaned = re.sub(r"[^0-9.\-]", "", value)
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def infer_niche(domain: str, sample_urls: list[str] | None = None) -> str:
    """Guess a site's niche from its domain, then from its sample article URLs."""
    d = domain.lower()
    for pattern, niche in _DOMAIN_NICHES:
        if pattern.search(d):
            return niche

    if sample_urls:
        url_text = " ".join(sample_urls).lower()
        for pattern, niche in _SAMPLE_URL_NICHES:
            if pattern.search(url_text):
                return niche

    if _GENERIC_PUBLISHER.search(d):
        return "News & Media"
    return "General"


def normalize_country(country: str | None) -> str:
    """Map a scraped country label (flag emoji or name) to a region name."""
    if not country:
        return "Global"
    for flag, pattern, region in _COUNTRIES:
        if flag in country or pattern.search(country):
            return region
    return re.sub(r"[^A-Za-z\s]", "", country).strip() or "Global"


def _optional_int(value: Any) -> int | None:
    number = parse_number(value)
    return None if number is None else int(number)


def _percent(value: Any) -> float | None:
    if isinstance(value, str):
        value = value.replace("%", "")
    return parse_number(value)


def _link_type(value: Any) -> str:
    text = str(value or "")
    if re.search(r"dofollow", text, re.IGNORECASE):
        return "Dofollow"
    if re.search(r"nofollow", text, re.IGNORECASE):
        return "Nofollow"
    return "Unknown"


def _created_at(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def transform_record(raw: Any) -> InventoryItem | None:
    """Convert one scraped record to an InventoryItem.

    Returns None for failed scrapes, records without a domain, and records
    missing either a rating (Ahrefs DR / Moz DA) or a price.
    """
    if not isinstance(raw, dict) or raw.get("success") is False:
        return None
    data = raw.get("data") or {}

    domain = raw.get("domain") or raw.get("site") or raw.get("url")
    if not domain:
        return None

    ahrefs_dr = parse_number(data.get("ahrefsDR"))
    moz_da = parse_number(data.get("mozDA"))
    dr = ahrefs_dr if ahrefs_dr is not None else moz_da

    traffic_ahrefs = parse_number(data.get("ahrefsOrganicTraffic"))
    traffic_similarweb = parse_number(data.get("similarwebTraffic"))
    traffic_semrush = parse_number(data.get("semrushTotalTraffic"))
    traffic = max(traffic_ahrefs or 0, traffic_similarweb or 0, traffic_semrush or 0)

    base_price = next(
        (
            p
            for p in (
                parse_number(data.get("contentPlacementPrice")),
                parse_number(data.get("writingPlacementPrice")),
                parse_number(data.get("specialTopicPrice")),
            )
            if p is not None
        ),
        None,
    )

    if not dr or not base_price:
        return None

    spam_digits = re.sub(r"[^0-9]", "", str(data.get("spamScore") or ""))
    content_size_match = re.search(r"\d+", str(data.get("requiredContentSize") or ""))
    tat = data.get("tat")
    sample_urls = data.get("sampleUrls") if isinstance(data.get("sampleUrls"), list) else []

    try:
        return InventoryItem(
            id=str(raw.get("siteId") or domain),
            domain=domain,
            niche=infer_niche(domain, sample_urls),
            dr=int(dr),
            traffic=int(traffic),
            price=math.floor(base_price * PRICE_MARKUP + 0.5),
            region=normalize_country(data.get("country")),
            spam_score=int(spam_digits) if spam_digits else 0,
            google_news=bool(re.search(r"yes", str(data.get("googleNews") or ""), re.IGNORECASE)),
            moz_da=None if moz_da is None else int(moz_da),
            semrush_as=_optional_int(data.get("semrushAS")),
            referring_domains=_optional_int(data.get("referralDomains")),
            completion_rate=_percent(data.get("completionRate")),
            avg_lifetime=_percent(data.get("avgLifetimeOfLinks")),
            tat=tat.split("\n")[0] if isinstance(tat, str) else None,
            link_type=_link_type(data.get("linkAttributionType")),
            language=data.get("language") or "English",
            content_size=int(content_size_match.group()) if content_size_match else None,
            sample_urls=[str(u) for u in sample_urls[:MAX_SAMPLE_URLS]],
            traffic_ahrefs=None if traffic_ahrefs is None else int(traffic_ahrefs),
            traffic_similarweb=None if traffic_similarweb is None else int(traffic_similarweb),
            traffic_semrush=None if traffic_semrush is None else int(traffic_semrush),
            created_at=_created_at(raw.get("timestamp")),
        )
    except ValidationError as e:
        log.warning("inventory_record_rejected", domain=domain, error=str(e))
        return None


def transform_records(records: list[Any]) -> list[InventoryItem]:
    """Transform a scraper export, dropping unusable records, sorted by DR descending."""
    items = [item for item in (transform_record(r) for r in records) if item is not None]
    return sorted(items, key=lambda item: item.dr, reverse=True)

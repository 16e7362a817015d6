"""Tests for scraped inventory record normalization."""

from datetime import datetime, timezone

import pytest

from whitehatlink.inventory.normalizer import (
    infer_niche,
    normalize_country,
    parse_number,
    transform_record,
    transform_records,
)


class TestParseNumber:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("12,345", 12345.0),
            ("$150", 150.0),
            ("3.5", 3.5),
            (42, 42.0),
            (7.25, 7.25),
        ],
    )
    def test_parses(self, value, expected):
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "n/a", True, float("nan"), [], {}])
    def test_unparseable(self, value):
        assert parse_number(value) is None


class TestInferNiche:
    def test_domain_keywords(self):
        assert infer_niche("cryptodaily.io") == "Crypto"
        assert infer_niche("mybank-review.com") == "Finance"
        assert infer_niche("techradar.example") == "Tech"

    def test_first_match_wins(self):
        # "fitness" matches Health before Sports
        assert infer_niche("fitnessguru.com") == "Health"

    def test_falls_back_to_sample_urls(self):
        urls = ["https://example.org/best-seo-tools"]
        assert infer_niche("example.org", urls) == "Marketing"

    def test_generic_publisher(self):
        assert infer_niche("dailybulletin.org") == "News & Media"

    def test_general(self):
        assert infer_niche("xyz.org") == "General"


class TestNormalizeCountry:
    @pytest.mark.parametrize(
        "label,expected",
        [
            ("🇺🇸", "USA"),
            ("United States", "USA"),
            ("US", "USA"),
            ("🇬🇧 United Kingdom", "UK"),
            ("Australia", "Australia"),
            ("🇦🇺", "Australia"),
            ("Germany", "Germany"),
            (None, "Global"),
            ("", "Global"),
            ("Brazil 🇧🇷", "Brazil"),
        ],
    )
    def test_labels(self, label, expected):
        assert normalize_country(label) == expected

    def test_australia_is_not_usa(self):
        assert normalize_country("australia") == "Australia"


class TestTransformRecord:
    def test_full_record(self, sample_raw_record):
        item = transform_record(sample_raw_record)

        assert item is not None
        assert item.id == "site-001"
        assert item.domain == "techcrunchy.com"
        assert item.niche == "Tech"
        assert item.dr == 72
        assert item.moz_da == 65
        assert item.traffic == 120000
        assert item.price == 300
        assert item.region == "USA"
        assert item.spam_score == 3
        assert item.google_news is True
        assert item.link_type == "Dofollow"
        assert item.content_size == 800
        assert item.tat == "3 days"
        assert item.language == "English"
        assert item.created_at == datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)
        assert len(item.sample_urls) == 2

    def test_moz_da_fallback(self, sample_raw_record):
        del sample_raw_record["data"]["ahrefsDR"]
        assert transform_record(sample_raw_record).dr == 65

    def test_price_rounds_half_up(self, sample_raw_record):
        sample_raw_record["data"]["contentPlacementPrice"] = "24.25"
        assert transform_record(sample_raw_record).price == 49

    def test_price_falls_back_to_writing_price(self, sample_raw_record):
        del sample_raw_record["data"]["contentPlacementPrice"]
        sample_raw_record["data"]["writingPlacementPrice"] = "80"
        assert transform_record(sample_raw_record).price == 160

    def test_missing_price_dropped(self, sample_raw_record):
        del sample_raw_record["data"]["contentPlacementPrice"]
        assert transform_record(sample_raw_record) is None

    def test_missing_rating_dropped(self, sample_raw_record):
        del sample_raw_record["data"]["ahrefsDR"]
        del sample_raw_record["data"]["mozDA"]
        assert transform_record(sample_raw_record) is None

    def test_failed_scrape_dropped(self, sample_raw_record):
        sample_raw_record["success"] = False
        assert transform_record(sample_raw_record) is None

    def test_non_dict_dropped(self):
        assert transform_record("not a record") is None

    def test_out_of_range_dr_rejected(self, sample_raw_record):
        sample_raw_record["data"]["ahrefsDR"] = "150"
        assert transform_record(sample_raw_record) is None

    def test_sample_urls_capped(self, sample_raw_record):
        sample_raw_record["data"]["sampleUrls"] = [f"https://techcrunchy.com/{i}" for i in range(9)]
        assert len(transform_record(sample_raw_record).sample_urls) == 5

    def test_unknown_link_type(self, sample_raw_record):
        sample_raw_record["data"]["linkAttributionType"] = "sponsored"
        assert transform_record(sample_raw_record).link_type == "Unknown"


def test_transform_records_sorted_by_dr(sample_raw_record):
    low = {**sample_raw_record, "siteId": "low", "data": {**sample_raw_record["data"], "ahrefsDR": "20"}}
    broken = {"domain": "broken.com", "data": {}}

    items = transform_records([low, sample_raw_record, broken])

    assert [i.id for i in items] == ["site-001", "low"]

from __future__ import annotations

import json

import pytest

from archive_urls.config import SourceName
from archive_urls.engine import Record, SourceError, build_sources
from archive_urls.engine.sources import CommonCrawlSource, VirusTotalSource, WaybackSource


def test_wayback_requests_subdomain_wildcard(make_fetcher, archive_stub, cdx_body) -> None:
    archive_stub.route("web.archive.org", cdx_body([]))
    WaybackSource(make_fetcher()).fetch("example.com", exclude_subdomains=False)
    params = archive_stub.requests[0].url.params
    assert params["url"] == "*.example.com/*"
    assert params["output"] == "json"
    assert params["collapse"] == "urlkey"


def test_wayback_exact_host_without_wildcard(make_fetcher, archive_stub, cdx_body) -> None:
    archive_stub.route("web.archive.org", cdx_body([]))
    WaybackSource(make_fetcher()).fetch("example.com", exclude_subdomains=True)
    assert archive_stub.requests[0].url.params["url"] == "example.com/*"


def test_wayback_discards_header_row_unconditionally(make_fetcher, archive_stub) -> None:
    body = json.dumps(
        [
            ["original", "timestamp", "url"],
            ["_", "20200101000000", "http://example.com/a"],
            ["_", "20210101000000", "http://example.com/b"],
        ]
    )
    archive_stub.route("web.archive.org", body)
    records = WaybackSource(make_fetcher()).fetch("example.com", exclude_subdomains=False)
    assert records == [
        Record("20200101000000", "http://example.com/a"),
        Record("20210101000000", "http://example.com/b"),
    ]


def test_wayback_header_row_not_validated(make_fetcher, archive_stub) -> None:
    # a header that looks like data is still dropped
    body = json.dumps([["k", "20190101000000", "http://example.com/first"], ["k", "20190101000000", "http://example.com/second"]])
    archive_stub.route("web.archive.org", body)
    records = WaybackSource(make_fetcher()).fetch("example.com", exclude_subdomains=False)
    assert [record.url for record in records] == ["http://example.com/second"]


def test_wayback_skips_malformed_rows(make_fetcher, archive_stub) -> None:
    body = json.dumps([["h"], ["short"], "not-a-row", ["k", "20200101000000", ""], ["k", "20200101000000", "http://example.com/ok"]])
    archive_stub.route("web.archive.org", body)
    records = WaybackSource(make_fetcher()).fetch("example.com", exclude_subdomains=False)
    assert records == [Record("20200101000000", "http://example.com/ok")]


@pytest.mark.parametrize("body", ["", "[]", "\n"])
def test_wayback_empty_results(make_fetcher, archive_stub, body: str) -> None:
    archive_stub.route("web.archive.org", body)
    assert WaybackSource(make_fetcher()).fetch("example.com", exclude_subdomains=False) == []


@pytest.mark.parametrize("body", ["<html>busy</html>", '{"error": "x"}'])
def test_wayback_undecodable_body_is_source_error(make_fetcher, archive_stub, body: str) -> None:
    archive_stub.route("web.archive.org", body)
    with pytest.raises(SourceError):
        WaybackSource(make_fetcher()).fetch("example.com", exclude_subdomains=False)


def test_wayback_transport_error_is_source_error(make_fetcher, archive_stub) -> None:
    archive_stub.route_error("web.archive.org")
    with pytest.raises(SourceError):
        WaybackSource(make_fetcher()).fetch("example.com", exclude_subdomains=False)


def test_commoncrawl_query_uses_configured_index(make_fetcher, archive_stub) -> None:
    archive_stub.route("index.commoncrawl.org", "")
    source = CommonCrawlSource(make_fetcher(commoncrawl_index="CC-MAIN-2024-33"))
    source.fetch("example.com", exclude_subdomains=False)
    request = archive_stub.requests[0]
    assert request.url.path == "/CC-MAIN-2024-33-index"
    assert request.url.params["url"] == "*.example.com/*"
    assert request.url.params["output"] == "json"


def test_commoncrawl_skips_undecodable_lines(make_fetcher, archive_stub, ndjson_body) -> None:
    body = (
        ndjson_body([{"url": "http://example.com/a", "timestamp": "20180101000000"}])
        + "this is not json\n"
        + '{"message": "no url here"}\n'
        + '["array"]\n'
        + ndjson_body([{"url": "http://example.com/b"}])
    )
    archive_stub.route("index.commoncrawl.org", body)
    records = CommonCrawlSource(make_fetcher()).fetch("example.com", exclude_subdomains=True)
    assert records == [
        Record("20180101000000", "http://example.com/a"),
        Record("", "http://example.com/b"),
    ]


def test_commoncrawl_no_captures_status_is_source_error(make_fetcher, archive_stub) -> None:
    archive_stub.route("index.commoncrawl.org", '{"message": "No Captures found"}', status=404)
    with pytest.raises(SourceError):
        CommonCrawlSource(make_fetcher()).fetch("example.com", exclude_subdomains=False)


def test_virustotal_without_key_is_disabled(make_fetcher, archive_stub) -> None:
    source = VirusTotalSource(make_fetcher())
    assert not source.enabled
    assert source.fetch("example.com", exclude_subdomains=False) == []
    assert archive_stub.requests == []


def test_virustotal_reads_detected_urls(make_fetcher, archive_stub) -> None:
    payload = {
        "detected_urls": [
            {"url": "http://example.com/bad", "positives": 3, "scan_date": "2018-03-26 09:22:43"},
            {"positives": 1},
            "garbage",
            {"url": "http://sub.example.com/x"},
        ]
    }
    archive_stub.route("www.virustotal.com", json.dumps(payload))
    source = VirusTotalSource(make_fetcher(virustotal_api_key="k3y"))
    records = source.fetch("example.com", exclude_subdomains=False)
    assert records == [Record("", "http://example.com/bad"), Record("", "http://sub.example.com/x")]
    params = archive_stub.requests[0].url.params
    assert params["apikey"] == "k3y"
    assert params["domain"] == "example.com"


def test_virustotal_report_without_detected_urls(make_fetcher, archive_stub) -> None:
    archive_stub.route("www.virustotal.com", json.dumps({"response_code": 0}))
    source = VirusTotalSource(make_fetcher(virustotal_api_key="k3y"))
    assert source.fetch("example.com", exclude_subdomains=False) == []


def test_virustotal_undecodable_body_is_source_error(make_fetcher, archive_stub) -> None:
    archive_stub.route("www.virustotal.com", "Forbidden")
    source = VirusTotalSource(make_fetcher(virustotal_api_key="k3y"))
    with pytest.raises(SourceError):
        source.fetch("example.com", exclude_subdomains=False)


def test_build_sources_follows_catalog_order(make_fetcher) -> None:
    fetcher = make_fetcher()
    sources = build_sources([SourceName.VIRUSTOTAL, SourceName.WAYBACK], fetcher)
    assert [source.name for source in sources] == [SourceName.WAYBACK, SourceName.VIRUSTOTAL]
    assert all(source.fetcher is fetcher for source in sources)

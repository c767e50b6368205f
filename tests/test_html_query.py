from __future__ import annotations

import unittest

from app.scraping.errors import ScraperConfigurationError
from app.scraping.query.html_query import HTMLQuery, split_selector

PAGE = """
<html>
  <head><meta property="og:image" content="https://cdn.example.org/cover.jpg"></head>
  <body>
    <h1 class="title">  Sunset
        Drive </h1>
    <div class="cast">
      <a href="/models/ava">Ava</a>
      <a href="/models/bea">Bea</a>
    </div>
    <ul class="tags"><li>outdoor</li><li>beach</li></ul>
    <p class="note primary wide">Note</p>
  </body>
</html>
"""


def _unexpected_loader(target: str) -> HTMLQuery:
    raise AssertionError(f"unexpected sub-scrape of {target}")


class TestHTMLQuery(unittest.TestCase):
    def setUp(self) -> None:
        self.query = HTMLQuery.from_payload(
            PAGE.encode("utf-8"),
            url="https://example.org/videos/1",
            loader=_unexpected_loader,
        )

    def test_text_is_whitespace_collapsed(self) -> None:
        self.assertEqual(self.query.evaluate("h1.title"), ["Sunset Drive"])

    def test_multiple_nodes_keep_document_order(self) -> None:
        self.assertEqual(self.query.evaluate("ul.tags li"), ["outdoor", "beach"])

    def test_attribute_suffix(self) -> None:
        self.assertEqual(
            self.query.evaluate("div.cast a::attr(href)"),
            ["/models/ava", "/models/bea"],
        )
        self.assertEqual(
            self.query.evaluate("meta[property='og:image']::attr(content)"),
            ["https://cdn.example.org/cover.jpg"],
        )

    def test_explicit_text_suffix(self) -> None:
        self.assertEqual(self.query.evaluate("div.cast a::text"), ["Ava", "Bea"])

    def test_multi_valued_attribute_is_joined(self) -> None:
        self.assertEqual(self.query.evaluate("p.note::attr(class)"), ["note primary wide"])

    def test_missing_attribute_is_skipped(self) -> None:
        self.assertEqual(self.query.evaluate("h1.title::attr(href)"), [])

    def test_matched_nodes_without_attribute_log_a_miss(self) -> None:
        with self.assertLogs("app.scraping.query.html_query", level="WARNING") as logs:
            self.assertEqual(self.query.evaluate("div.cast a::attr(title)"), [])
        self.assertIn("selector_not_found", logs.output[0])

    def test_miss_returns_empty(self) -> None:
        with self.assertLogs("app.scraping.query.html_query", level="WARNING") as logs:
            self.assertEqual(self.query.evaluate("div.missing"), [])
        self.assertIn("selector_not_found", logs.output[0])

    def test_invalid_selector_raises_configuration_error(self) -> None:
        with self.assertRaises(ScraperConfigurationError):
            self.query.evaluate("div[")

    def test_sub_scrape_resolves_relative_link(self) -> None:
        requested: list[str] = []

        def _loader(target: str) -> HTMLQuery:
            requested.append(target)
            return HTMLQuery.from_payload("<span>Ava bio</span>", url=target, loader=_loader)

        query = HTMLQuery.from_payload(PAGE, url="https://example.org/videos/1", loader=_loader)
        sub_query = query.sub_scrape("/models/ava")

        self.assertEqual(requested, ["https://example.org/models/ava"])
        self.assertEqual(sub_query.evaluate("span"), ["Ava bio"])


class TestSplitSelector(unittest.TestCase):
    def test_plain_selector(self) -> None:
        self.assertEqual(split_selector(" div a "), ("div a", None))

    def test_attr_selector(self) -> None:
        self.assertEqual(split_selector("div a::attr( href )"), ("div a", "href"))

    def test_text_selector(self) -> None:
        self.assertEqual(split_selector("div a::text"), ("div a", None))


if __name__ == "__main__":
    unittest.main()

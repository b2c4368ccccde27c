import unittest

from stocksense.config import QuoteConfig
from stocksense.modules.analysis_engine.extractors import (
    extract_quote_levels,
    find_first_price,
    parse_chart_points,
)


class QuoteLevelExtractionTest(unittest.TestCase):
    def setUp(self):
        self.config = QuoteConfig()

    def test_structured_payload_wins(self):
        text = (
            "Sure, here you go:\n```json\n"
            '{"currentPrice":100.5,"suggestedBuy":95,"suggestedSell":110}\n```'
        )
        self.assertEqual(extract_quote_levels(text, self.config), (100.5, 95.0, 110.0))

    def test_missing_levels_are_derived_from_current_price(self):
        text = '{"currentPrice":"₹2,450.10","suggestedBuy":"N/A","suggestedSell":null}'
        current, buy, sell = extract_quote_levels(text, self.config)
        self.assertEqual(current, 2450.1)
        self.assertAlmostEqual(buy, 2327.6, places=1)
        self.assertAlmostEqual(sell, 2695.11, places=1)

    def test_text_heuristic_when_json_is_unusable(self):
        text = "Result: {currentPrice: unknown} but the price is around 452.30 today."
        current, buy, sell = extract_quote_levels(text, self.config)
        self.assertEqual(current, 452.3)
        self.assertAlmostEqual(buy, 429.69, places=1)
        self.assertAlmostEqual(sell, 497.53, places=1)

    def test_zero_current_price_falls_back_to_text(self):
        text = '{"currentPrice": 0} last traded at 1,312.40 on NSE'
        current, _, _ = extract_quote_levels(text, self.config)
        self.assertEqual(current, 1312.4)

    def test_levels_inside_object_are_not_a_current_price(self):
        text = '{"currentPrice": "N/A", "suggestedBuy": 95, "suggestedSell": 110}'
        self.assertIsNone(extract_quote_levels(text, self.config))

    def test_prose_around_unusable_object_is_scanned(self):
        text = '```json\n{"currentPrice": null, "suggestedBuy": 95}\n```\nLast traded at 812.40.'
        current, buy, _ = extract_quote_levels(text, self.config)
        self.assertEqual(current, 812.4)
        self.assertAlmostEqual(buy, 771.78, places=1)

    def test_custom_ratios(self):
        config = QuoteConfig(buy_ratio=0.9, sell_ratio=1.2)
        _, buy, sell = extract_quote_levels("trading near 200", config)
        self.assertAlmostEqual(buy, 180.0)
        self.assertAlmostEqual(sell, 240.0)

    def test_no_usable_price(self):
        self.assertIsNone(extract_quote_levels("no data available", self.config))
        self.assertIsNone(extract_quote_levels('{"currentPrice": 0}', self.config))
        self.assertIsNone(extract_quote_levels("", self.config))

    def test_first_price_skips_values_at_or_below_threshold(self):
        self.assertEqual(find_first_price("Price: 0.5 then 1 then 12.75"), 12.75)
        self.assertIsNone(find_first_price("0.2 and 1.0"))


class ChartPointParsingTest(unittest.TestCase):
    def test_points_are_tagged_forecast_and_tolerant(self):
        text = (
            '```json\n[{"label":"Day 1","price":101.5},{"label":"Day 2","price":"102"},'
            ' "junk", {"price": "abc"}]\n```'
        )
        points = parse_chart_points(text)
        self.assertEqual([p.label for p in points], ["Day 1", "Day 2", "Day 4"])
        self.assertEqual([p.price for p in points], [101.5, 102.0, 0.0])
        self.assertTrue(all(p.type == "forecast" for p in points))

    def test_non_array_is_empty(self):
        self.assertEqual(parse_chart_points('{"label": "x", "price": 1}'), [])
        self.assertEqual(parse_chart_points("chart unavailable"), [])
        self.assertEqual(parse_chart_points(""), [])


if __name__ == "__main__":
    unittest.main()

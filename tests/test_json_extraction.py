import unittest

from stocksense.core.utils import clean_number, extract_json, strip_code_fences


class ExtractJsonTest(unittest.TestCase):
    def test_fenced_object_with_prose(self):
        text = (
            "Sure, here you go:\n```json\n"
            '{"currentPrice":100.5,"suggestedBuy":95,"suggestedSell":110}\n```'
        )
        self.assertEqual(
            extract_json(text),
            {"currentPrice": 100.5, "suggestedBuy": 95, "suggestedSell": 110},
        )

    def test_bare_fence_array(self):
        text = '```\n[{"label": "Day 1", "price": 10}]\n```'
        self.assertEqual(extract_json(text), [{"label": "Day 1", "price": 10}])

    def test_array_inside_prose_uses_first_opener(self):
        text = 'Projection follows [{"label": "Day 1", "price": 1.5}] and {note} ends here'
        self.assertEqual(extract_json(text), [{"label": "Day 1", "price": 1.5}])

    def test_object_before_array_extracts_object(self):
        text = 'Answer: {"levels": [1, 2, 3]} thanks'
        self.assertEqual(extract_json(text), {"levels": [1, 2, 3]})

    def test_no_json_returns_none(self):
        self.assertIsNone(extract_json("no data available"))

    def test_empty_and_none_return_none(self):
        self.assertIsNone(extract_json(""))
        self.assertIsNone(extract_json(None))
        self.assertIsNone(extract_json("```json\n```"))

    def test_multiple_fragments_fail_quietly(self):
        self.assertIsNone(extract_json('first {"a": 1} then {"b": 2}'))

    def test_strip_code_fences(self):
        self.assertEqual(strip_code_fences("```JSON\n{}\n```"), "{}")


class CleanNumberTest(unittest.TestCase):
    def test_currency_and_separators(self):
        self.assertEqual(clean_number("₹1,234.50"), 1234.5)

    def test_garbage_defaults_to_zero(self):
        self.assertEqual(clean_number("N/A"), 0)
        self.assertEqual(clean_number(None), 0)
        self.assertEqual(clean_number({"price": 1}), 0)
        self.assertEqual(clean_number("1.2.3"), 0)

    def test_numbers_pass_through(self):
        self.assertEqual(clean_number(42), 42)
        self.assertEqual(clean_number(-3.5), -3.5)

    def test_non_finite_and_bool_use_default(self):
        self.assertEqual(clean_number(float("nan")), 0)
        self.assertEqual(clean_number(float("inf"), default=7.0), 7.0)
        self.assertEqual(clean_number(True), 0)

    def test_custom_default(self):
        self.assertEqual(clean_number("--", default=1.5), 1.5)


if __name__ == "__main__":
    unittest.main()

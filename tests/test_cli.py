import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from stocksense.cli import app
from stocksense.config import AppConfig, DatabaseConfig
from stocksense.services.config_store import ConfigStore


class CliTest(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        config_path = root / "config" / "settings.yaml"
        ConfigStore(config_path).save(
            AppConfig(database=DatabaseConfig(url=f"sqlite:///{root / 'data' / 'cli.db'}"))
        )
        self.env = {
            "STOCKSENSE_CONFIG_FILE": str(config_path),
            "STOCKSENSE_GEMINI_API_KEY": "",
        }
        self.runner = CliRunner()

    def tearDown(self):
        self._tmp.cleanup()

    def test_quote_with_mock_provider(self):
        result = self.runner.invoke(app, ["quote", "itc", "--provider-id", "mock"], env=self.env)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Quote ITC", result.output)
        self.assertIn("ITC share price (mock)", result.output)

    def test_quote_without_key_reports_setup_required(self):
        result = self.runner.invoke(app, ["quote", "ITC"], env=self.env)
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Setup required", result.output)

    def test_analyze_json_records_search(self):
        result = self.runner.invoke(
            app,
            [
                "analyze", "tcs", "--buy-price", "1", "--quantity", "2",
                "--provider-id", "mock", "--email", "cli@example.com", "--json",
            ],
            env=self.env,
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('"signal": "WAIT"', result.output)

        stats = self.runner.invoke(app, ["logs", "stats"], env=self.env)
        self.assertEqual(stats.exit_code, 0, stats.output)
        self.assertIn("Total searches:", stats.output)
        self.assertIn("TCS: 1", stats.output)


if __name__ == "__main__":
    unittest.main()

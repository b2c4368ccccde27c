import tempfile
import unittest
from pathlib import Path

import yaml

from stocksense.core.errors import ValidationError
from stocksense.services.config_store import ConfigStore


class ConfigStoreTest(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.store = ConfigStore(config_path=self.root / "config" / "settings.yaml")

    def tearDown(self):
        self._tmp.cleanup()

    def _db_patch(self):
        return {"database": {"url": f"sqlite:///{self.root / 'data' / 'stocksense.db'}"}}

    def test_load_creates_defaults(self):
        config = self.store.load()
        self.assertTrue(self.store.config_path.exists())
        self.assertEqual(config.analysis.default_provider, "gemini")
        self.assertEqual(config.quote.buy_ratio, 0.95)
        self.assertEqual(config.quote.sell_ratio, 1.10)
        self.assertEqual(config.tracking.max_logs, 100)
        self.assertEqual(
            sorted(config.analysis_provider_map()),
            ["gemini", "mock", "openai_compatible"],
        )

    def test_patch_roundtrip(self):
        self.store.patch(self._db_patch())
        patched = self.store.patch({"tracking": {"max_logs": 25}})
        self.assertEqual(patched.tracking.max_logs, 25)
        self.assertEqual(self.store.load().tracking.max_logs, 25)
        self.assertTrue((self.root / "data").is_dir())

    def test_missing_builtin_providers_are_restored(self):
        self.store.config_path.parent.mkdir(parents=True)
        self.store.config_path.write_text(
            yaml.safe_dump(
                {
                    "database": self._db_patch()["database"],
                    "analysis": {
                        "default_provider": "mock",
                        "providers": [
                            {"provider_id": "mock", "type": "mock", "base_url": "", "models": ["market-default"]}
                        ],
                    },
                }
            ),
            encoding="utf-8",
        )
        config = self.store.load()
        self.assertEqual(config.analysis.default_provider, "mock")
        self.assertEqual(
            [provider.provider_id for provider in config.analysis.providers],
            ["mock", "gemini", "openai_compatible"],
        )

    def test_set_default_provider(self):
        self.store.patch(self._db_patch())
        self.assertEqual(self.store.set_default_provider("mock").analysis.default_provider, "mock")
        self.assertEqual(self.store.load().analysis.default_provider, "mock")
        with self.assertRaises(ValidationError):
            self.store.set_default_provider("unknown")

    def test_invalid_content_is_rejected(self):
        self.store.config_path.parent.mkdir(parents=True)
        self.store.config_path.write_text("- just\n- a list\n", encoding="utf-8")
        with self.assertRaises(ValueError):
            self.store.load()


if __name__ == "__main__":
    unittest.main()

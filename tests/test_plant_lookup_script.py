import importlib.util
import io
import sys
import unittest
from contextlib import redirect_stdout
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

_SPEC = importlib.util.spec_from_file_location(
    "plant_lookup", ROOT / "scripts" / "plant_lookup.py"
)
plant_lookup = importlib.util.module_from_spec(_SPEC)
_SPEC.loader.exec_module(plant_lookup)


class PlantLookupScriptTests(unittest.TestCase):
    def test_prints_mentions(self) -> None:
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            code = plant_lookup.main(["--text", "my basil is drooping"])
        self.assertEqual(code, 0)
        self.assertIn("- basil [high, common_name]", buffer.getvalue())

    def test_reports_no_mentions(self) -> None:
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            plant_lookup.main(["--text", "good morning", "--resolve"])
        self.assertIn("No plant mentions found.", buffer.getvalue())


if __name__ == "__main__":
    unittest.main()

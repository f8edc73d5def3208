from __future__ import annotations

import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PIL import Image

from extraction.contracts import ExtractionConfig, ExtractionResult
from ocr.contracts import OcrConfig, OcrEngineName, OcrTextResult
from ocr.engines.base import OcrEngine
from pipeline.cli import build_arg_parser, build_run_options, main


class _FakeOcrEngine(OcrEngine):
    def run_on_image_file(self, *, config: OcrConfig, image_file: Path) -> OcrTextResult:
        return OcrTextResult(
            ok=True,
            engine=OcrEngineName.OLLAMA_CLI,
            source_image=str(image_file),
            text="# Rechnung 2024-17",
            errors=[],
            meta={},
        )


class _FakeClient:
    def generate(self, *, config: ExtractionConfig, prompt: str) -> ExtractionResult:
        return ExtractionResult(
            ok=True,
            model=config.model,
            text='{"Invoice": {"InvoiceNumber": "2024-17", "Seller": {"City": "Köln"}}}',
            errors=[],
            meta={},
        )


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.scratch = self.root / "scratch"
        self.scratch.mkdir()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, argv: list[str]) -> tuple[int, str, str]:
        stdout, stderr = io.StringIO(), io.StringIO()
        with (
            patch("sys.stdout", stdout),
            patch("sys.stderr", stderr),
            patch("pipeline.cli.load_dotenv"),
            patch("pipeline.runner.ensure_models_ready"),
            patch("pipeline.runner.get_ocr_engine", return_value=_FakeOcrEngine()),
            patch("pipeline.runner.OllamaGenerateClient", return_value=_FakeClient()),
            patch("pipeline.workspace.tempfile.gettempdir", return_value=str(self.scratch)),
        ):
            code = main(argv + ["--log-level", "ERROR"])
        return code, stdout.getvalue(), stderr.getvalue()

    def _image(self) -> Path:
        path = self.root / "scan.jpg"
        Image.new("RGB", (16, 16), color="white").save(path, format="JPEG")
        return path

    def test_missing_input_prints_usage(self) -> None:
        code, stdout, stderr = self._run([])

        self.assertEqual(code, 1)
        self.assertEqual(stdout, "")
        self.assertIn("Usage: invoice-ocr --input <file>", stderr)

    def test_prints_json_array_to_stdout(self) -> None:
        code, stdout, _ = self._run(["--input", str(self._image())])

        self.assertEqual(code, 0)
        self.assertIn("Köln", stdout)
        entries = json.loads(stdout)
        self.assertEqual(len(entries), 1)
        self.assertEqual(json.loads(entries[0])["Invoice"]["InvoiceNumber"], "2024-17")
        self.assertEqual(list(self.scratch.iterdir()), [])

    def test_writes_output_file(self) -> None:
        out_file = self.root / "result.json"

        code, stdout, _ = self._run(["--input", str(self._image()), "--output", str(out_file)])

        self.assertEqual(code, 0)
        self.assertEqual(stdout, "")
        self.assertEqual(len(json.loads(out_file.read_text(encoding="utf-8"))), 1)

    def test_fatal_error_exit_code_and_cleanup(self) -> None:
        code, stdout, stderr = self._run(["--input", str(self.root / "scan.bmp")])

        self.assertEqual(code, 1)
        self.assertEqual(stdout, "")
        self.assertIn("Fatal error: Unsupported file type: .bmp", stderr)
        self.assertEqual(list(self.scratch.iterdir()), [])

    def test_input_without_value_exits_with_usage(self) -> None:
        code, stdout, stderr = self._run(["--input"])

        self.assertEqual(code, 1)
        self.assertEqual(stdout, "")
        self.assertIn("Usage: invoice-ocr --input <file>", stderr)

    def test_malformed_option_exits_with_usage(self) -> None:
        code, _, stderr = self._run(["--input", str(self._image()), "--dpi", "x"])

        self.assertEqual(code, 1)
        self.assertIn("Usage: invoice-ocr --input <file>", stderr)
        self.assertIn("--dpi", stderr)

    def test_help_exits_zero(self) -> None:
        code, stdout, _ = self._run(["--help"])

        self.assertEqual(code, 0)
        self.assertIn("--seller-tax-no", stdout)

    def test_unbounded_megapixels_is_fatal(self) -> None:
        code, _, stderr = self._run(["--input", str(self._image()), "--max-megapixels", "inf"])

        self.assertEqual(code, 1)
        self.assertIn("Fatal error: max_megapixels must be a positive finite number", stderr)
        self.assertEqual(list(self.scratch.iterdir()), [])

    def test_invalid_option_value_is_fatal(self) -> None:
        code, _, stderr = self._run(["--input", str(self._image()), "--dpi", "0"])

        self.assertEqual(code, 1)
        self.assertIn("Fatal error: dpi must be a positive integer", stderr)


class TestBuildRunOptions(unittest.TestCase):
    def test_environment_overrides(self) -> None:
        env = {
            "OLLAMA_HOST": "gpu-box:11434",
            "INVOICE_OCR_MODEL": "my-ocr",
            "INVOICE_JSON_MODEL": "my-json",
        }
        args = build_arg_parser().parse_args(
            ["--input", "a.pdf", "--seller-address", "Main St 1", "--max-megapixels", "1.5", "--strict-json"]
        )

        with patch.dict(os.environ, env):
            options = build_run_options(args)

        self.assertEqual(options.extraction_config.host, "http://gpu-box:11434")
        self.assertEqual(options.ocr_config.model, "my-ocr")
        self.assertEqual(options.extraction_config.model, "my-json")
        self.assertTrue(options.extraction_config.strict)
        self.assertEqual(options.normalize_config.max_area_px, 1_500_000)
        self.assertEqual(options.seller.address, "Main St 1")
        self.assertEqual(options.seller.tax_no, "")

    def test_flags_win_over_environment(self) -> None:
        args = build_arg_parser().parse_args(["--input", "a.pdf", "--ocr-model", "flag-ocr"])

        with patch.dict(os.environ, {"INVOICE_OCR_MODEL": "env-ocr"}):
            options = build_run_options(args)

        self.assertEqual(options.ocr_config.model, "flag-ocr")
        self.assertTrue(options.check_models)


if __name__ == "__main__":
    unittest.main()

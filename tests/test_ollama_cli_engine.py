from __future__ import annotations

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from ocr.contracts import OcrConfig
from ocr.engines.ollama_cli import OllamaCliEngine, OllamaModelError, model_available, pull_model
from ocr.module import extract_text


def _completed(*, returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["ollama"], returncode=returncode, stdout=stdout, stderr=stderr)


class TestOllamaCliEngine(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.image = Path(self._tmp.name) / "resized_0.jpg"
        self.image.write_bytes(b"\xff\xd8\xff")
        self.config = OcrConfig(model="glm-ocr", timeout_s=30.0)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_success_returns_trimmed_stdout(self) -> None:
        with patch("ocr.engines.ollama_cli.subprocess.run", return_value=_completed(returncode=0, stdout="\n# Invoice 42\n\n")) as run:
            r = extract_text(config=self.config, image_file=self.image, engine=OllamaCliEngine())

        self.assertTrue(r.ok)
        self.assertEqual(r.text, "# Invoice 42")
        cmd = run.call_args.args[0]
        self.assertEqual(cmd[:3], ["ollama", "run", "glm-ocr"])
        self.assertEqual(cmd[3], f"Text Recognition: <{self.image}>")
        self.assertEqual(run.call_args.kwargs["timeout"], 30.0)

    def test_nonzero_exit_reports_status_code(self) -> None:
        with patch("ocr.engines.ollama_cli.subprocess.run", return_value=_completed(returncode=3, stderr="model crashed")):
            r = OllamaCliEngine().run_on_image_file(config=self.config, image_file=self.image)

        self.assertFalse(r.ok)
        self.assertIsNone(r.text)
        self.assertEqual(r.errors[0].code, "OCR_BACKEND_ERROR")
        self.assertEqual(r.errors[0].message, "Ollama run failed: 3")
        self.assertEqual(r.errors[0].detail["stderr"], "model crashed")

    def test_missing_binary(self) -> None:
        with patch("ocr.engines.ollama_cli.subprocess.run", side_effect=FileNotFoundError("ollama")):
            r = OllamaCliEngine().run_on_image_file(config=self.config, image_file=self.image)

        self.assertFalse(r.ok)
        self.assertEqual(r.errors[0].code, "OCR_BACKEND_NOT_INSTALLED")

    def test_timeout(self) -> None:
        with patch(
            "ocr.engines.ollama_cli.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="ollama", timeout=30.0),
        ):
            r = OllamaCliEngine().run_on_image_file(config=self.config, image_file=self.image)

        self.assertFalse(r.ok)
        self.assertEqual(r.errors[0].code, "OCR_TIMEOUT")

    def test_missing_image_skips_subprocess(self) -> None:
        with patch("ocr.engines.ollama_cli.subprocess.run") as run:
            r = OllamaCliEngine().run_on_image_file(config=self.config, image_file=self.image.with_name("nope.jpg"))

        self.assertFalse(r.ok)
        self.assertEqual(r.errors[0].code, "OCR_INPUT_NOT_FOUND")
        run.assert_not_called()


class TestOllamaModelManagement(unittest.TestCase):
    def test_model_available_reads_list_output(self) -> None:
        listing = "NAME              ID      SIZE\nglm-ocr:latest    abc     2 GB\n"
        with patch("ocr.engines.ollama_cli.subprocess.run", return_value=_completed(returncode=0, stdout=listing)):
            self.assertTrue(model_available("glm-ocr"))
            self.assertFalse(model_available("qwen3:1.7b-q4_K_M"))

    def test_pull_failure_raises(self) -> None:
        with patch("ocr.engines.ollama_cli.subprocess.run", return_value=_completed(returncode=1)):
            with self.assertRaises(OllamaModelError) as ctx:
                pull_model("glm-ocr")
        self.assertEqual(str(ctx.exception), "Failed to pull model: 1")


class TestOcrConfig(unittest.TestCase):
    def test_prompt_template_needs_placeholder(self) -> None:
        with self.assertRaises(ValueError):
            OcrConfig(prompt_template="Text Recognition")


if __name__ == "__main__":
    unittest.main()

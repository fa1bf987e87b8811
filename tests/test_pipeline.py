from __future__ import annotations

import os
import tempfile
import unittest

from graymap import GrayImage, load_pgm, save_pgm
from graymap.pipeline import ImagePipeline, PipelineSettings, Step


class TestImagePipeline(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def _path(self, name: str) -> str:
        return os.path.join(self._tmp.name, name)

    def test_steps_run_in_order(self) -> None:
        img = GrayImage.from_rows([[10, 20], [30, 40]])
        result = ImagePipeline().run(img, [Step("rotate"), Step("negative"), Step("crop", (0, 0, 2, 1))])
        self.assertEqual(result.image.rows(), [[235, 215]])

    def test_stats_and_locate_reports(self) -> None:
        needle = self._path("needle.pgm")
        save_pgm(GrayImage.from_rows([[9, 9]]), needle)
        img = GrayImage.from_rows([[0, 0, 0], [0, 9, 9]])
        result = ImagePipeline().run(img, [Step("stats"), Step("locate", (needle,))])
        self.assertEqual(result.reports[0].detail, "3x2 maxval=255 min=0 max=9")
        self.assertEqual(result.reports[1].detail, "found at (1, 1)")
        self.assertIsNone(result.reports[0].pixmem)

    def test_paste_and_blend_load_second_image(self) -> None:
        patch = self._path("patch.pgm")
        save_pgm(GrayImage.from_rows([[100]]), patch)
        img = GrayImage(2, 1, 255, [0, 50])
        result = ImagePipeline().run(img, [Step("paste", (patch, 0, 0)), Step("blend", (patch, 1, 0, 0.5))])
        self.assertEqual(list(result.image.pixels), [100, 75])

    def test_count_pixels(self) -> None:
        img = GrayImage(2, 2, 255, bytes(4))
        result = ImagePipeline(PipelineSettings(count_pixels=True)).run(img, [Step("negative"), Step("mirror")])
        self.assertEqual([report.pixmem for report in result.reports], [8, 8])

    def test_output_maxval(self) -> None:
        img = GrayImage(1, 1, 255, [3])
        result = ImagePipeline(PipelineSettings(output_maxval=7)).run(img, [Step("threshold", (1,))])
        self.assertEqual(result.image.maxval, 7)
        self.assertEqual(list(result.image.pixels), [255])
        with self.assertRaises(ValueError):
            ImagePipeline(PipelineSettings(output_maxval=0)).run(img, [])

    def test_unknown_step(self) -> None:
        with self.assertRaises(ValueError):
            ImagePipeline().run(GrayImage(1, 1, 255, [0]), [Step("sharpen")])

    def test_run_file(self) -> None:
        source = self._path("in.pgm")
        output = self._path("out.pgm")
        save_pgm(GrayImage.from_rows([[1, 2, 3]]), source)
        ImagePipeline().run_file(source, [Step("mirror"), Step("brighten", (2.0,))], output)
        self.assertEqual(load_pgm(output).rows(), [[6, 4, 2]])

    def test_run_file_validates_path(self) -> None:
        pipeline = ImagePipeline()
        with self.assertRaises(ValueError):
            pipeline.run_file(self._path("in.xyz"), [])
        with self.assertRaises(FileNotFoundError):
            pipeline.run_file(self._path("absent.pgm"), [])


if __name__ == "__main__":
    unittest.main()

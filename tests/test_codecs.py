from __future__ import annotations

import os
import tempfile
import threading
import unittest

from PIL import Image

from graymap import ErrorKind, GrayImage, ImageError, ImageLoader, error_message, from_pil, load_image, save_image, to_pil
from graymap.codec import PgmCodec, PillowCodec


class TestPillowInterop(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def _path(self, name: str) -> str:
        return os.path.join(self._tmp.name, name)

    def test_from_pil_converts_to_gray(self) -> None:
        rgb = Image.new("RGB", (2, 1), (255, 255, 255))
        img = from_pil(rgb)
        self.assertEqual((img.width, img.height, img.maxval), (2, 1, 255))
        self.assertEqual(list(img.pixels), [255, 255])

    def test_to_pil(self) -> None:
        img = GrayImage.from_rows([[1, 2, 3], [4, 5, 6]])
        pil = to_pil(img)
        self.assertEqual(pil.mode, "L")
        self.assertEqual(pil.size, (3, 2))
        self.assertEqual(list(pil.getdata()), [1, 2, 3, 4, 5, 6])

    def test_png_round_trip(self) -> None:
        img = GrayImage.from_rows([[0, 128], [64, 255]])
        path = self._path("img.png")
        save_image(img, path)
        self.assertEqual(load_image(path), img)

    def test_pillow_codec_reports_invalid_file(self) -> None:
        path = self._path("junk.png")
        with open(path, "wb") as handle:
            handle.write(b"not an image")
        with self.assertRaises(ImageError) as ctx:
            PillowCodec().load(path)
        self.assertIs(ctx.exception.kind, ErrorKind.INVALID_FORMAT)

    def test_pillow_codec_rejects_empty_image(self) -> None:
        path = self._path("empty.png")
        for w, h in ((0, 3), (3, 0)):
            with self.assertRaises(ImageError) as ctx:
                save_image(GrayImage.create(w, h), path)
            self.assertIs(ctx.exception.kind, ErrorKind.WRITE_PIXELS_FAILED)
            self.assertEqual(error_message(), ErrorKind.WRITE_PIXELS_FAILED.value)
        self.assertFalse(os.path.exists(path))

    def test_pillow_codec_reports_missing_file(self) -> None:
        with self.assertRaises(ImageError) as ctx:
            PillowCodec().load(self._path("missing.png"))
        self.assertIs(ctx.exception.kind, ErrorKind.OPEN_FAILED)


class TestImageLoader(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def test_dispatch_by_extension(self) -> None:
        loader = ImageLoader()
        self.assertIsInstance(loader.codec_for("a.PGM"), PgmCodec)
        self.assertIsInstance(loader.codec_for("a.png"), PillowCodec)
        self.assertIn(".jpeg", loader.supported_extensions)

    def test_unknown_extension(self) -> None:
        with self.assertRaises(ValueError):
            ImageLoader().codec_for("image.webm")

    def test_custom_codecs(self) -> None:
        loader = ImageLoader({".pgm": PgmCodec()})
        self.assertEqual(loader.supported_extensions, {".pgm"})
        with self.assertRaises(ValueError):
            loader.codec_for("a.png")

    def test_pgm_through_loader(self) -> None:
        path = os.path.join(self._tmp.name, "x.pgm")
        img = GrayImage(2, 2, 50, [1, 2, 3, 4])
        save_image(img, path)
        self.assertEqual(load_image(path), img)


class TestErrorMessage(unittest.TestCase):
    def test_error_cause_is_thread_local(self) -> None:
        ImageError(ErrorKind.INVALID_MAXVAL)
        seen = []
        thread = threading.Thread(target=lambda: seen.append(error_message()))
        thread.start()
        thread.join()
        self.assertEqual(seen, [""])
        self.assertEqual(error_message(), "Invalid maxval")

    def test_message_includes_os_detail(self) -> None:
        err = ImageError(ErrorKind.OPEN_FAILED, "No such file or directory", errno=2)
        self.assertEqual(str(err), "Open failed: No such file or directory")
        self.assertEqual(err.cause, "Open failed")


if __name__ == "__main__":
    unittest.main()

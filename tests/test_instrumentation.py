from __future__ import annotations

import threading
import unittest

from graymap import create, image_init
from graymap import instrumentation
from graymap.instrumentation import PIXMEM


class TestInstrumentation(unittest.TestCase):
    def setUp(self) -> None:
        instrumentation.reset()

    def test_image_init_registers_counters(self) -> None:
        overhead = image_init(extra_counters=["custom"])
        self.assertGreaterEqual(overhead, 0.0)
        self.assertIn(PIXMEM, instrumentation.counters())
        self.assertIn("custom", instrumentation.counters())

    def test_calibration_is_cached(self) -> None:
        self.assertEqual(instrumentation.calibrate(), instrumentation.calibrate())

    def test_count_and_reset(self) -> None:
        instrumentation.count("ops", 3)
        instrumentation.count("ops")
        self.assertEqual(instrumentation.counter("ops"), 4)
        instrumentation.count(PIXMEM, 2)
        instrumentation.reset("ops")
        self.assertEqual(instrumentation.counter("ops"), 0)
        self.assertEqual(instrumentation.counter(PIXMEM), 2)
        instrumentation.reset()
        self.assertEqual(instrumentation.counter(PIXMEM), 0)

    def test_unknown_counter_reads_zero(self) -> None:
        self.assertEqual(instrumentation.counter("never-used"), 0)

    def test_measure_reports_delta(self) -> None:
        img = create(2, 2)
        img.get_pixel(0, 0)
        with instrumentation.measure() as measurement:
            img.get_pixel(1, 1)
            img.set_pixel(1, 1, 3)
        self.assertEqual(measurement.pixmem, 2)
        self.assertGreaterEqual(measurement.elapsed, 0.0)

    def test_counters_are_thread_local(self) -> None:
        instrumentation.count(PIXMEM, 5)
        seen = []

        def worker() -> None:
            seen.append(instrumentation.counter(PIXMEM))
            create(1, 1).get_pixel(0, 0)
            seen.append(instrumentation.counter(PIXMEM))

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()
        self.assertEqual(seen, [0, 1])
        self.assertEqual(instrumentation.counter(PIXMEM), 5)


if __name__ == "__main__":
    unittest.main()

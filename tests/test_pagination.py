from __future__ import annotations

import unittest

from services.pagination import page_numbers


class PageNumbersTests(unittest.TestCase):
    def test_short_strip_lists_every_page(self) -> None:
        self.assertEqual(page_numbers(1, 1), [1])
        self.assertEqual(page_numbers(3, 7), [1, 2, 3, 4, 5, 6, 7])

    def test_long_strip_marks_gaps(self) -> None:
        self.assertEqual(page_numbers(1, 10), [1, 2, 3, None, 9, 10])
        self.assertEqual(page_numbers(5, 10), [1, 2, 3, None, 5, None, 9, 10])
        self.assertEqual(page_numbers(4, 10), [1, 2, 3, 4, None, 9, 10])
        self.assertEqual(page_numbers(10, 10), [1, 2, 3, None, 9, 10])

    def test_out_of_range_current_is_clamped(self) -> None:
        self.assertEqual(page_numbers(50, 10), [1, 2, 3, None, 9, 10])
        self.assertEqual(page_numbers(0, 0), [1])


if __name__ == "__main__":
    unittest.main()

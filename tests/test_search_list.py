from __future__ import annotations

import unittest
from unittest import mock

from pages.search_list import sync_text_input
from services.list_controller import SearchListController


class LocalFilterInputTests(unittest.TestCase):
    def _input(self, value) -> mock.Mock:
        element = mock.Mock()
        element.value = value
        return element

    def test_reset_clears_stale_text(self) -> None:
        ctrl = SearchListController(mock.Mock(), filter_fields=("name",))
        ctrl.set_local_text_filter("para")
        element = self._input("para")

        ctrl.reset()

        self.assertTrue(sync_text_input(element, ctrl.local_text_filter))
        element.set_value.assert_called_once_with("")

    def test_matching_value_is_left_alone(self) -> None:
        element = self._input("para")
        self.assertFalse(sync_text_input(element, "para"))
        element.set_value.assert_not_called()

    def test_cleared_input_counts_as_empty(self) -> None:
        element = self._input(None)
        self.assertFalse(sync_text_input(element, ""))
        element.set_value.assert_not_called()


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import asyncio
import unittest

from services.data_provider import ProviderError
from services.list_controller import SearchListController


def _rows(count: int, prefix: str = "Item") -> list[dict]:
    return [{"id": str(i), "name": f"{prefix} {i}"} for i in range(1, count + 1)]


class _StaticProvider:
    def __init__(self, rows=None, error: Exception | None = None) -> None:
        self.rows = list(rows or [])
        self.error = error
        self.calls: list[dict] = []

    async def fetch(self, criteria):
        self.calls.append(dict(criteria))
        if self.error is not None:
            raise self.error
        return list(self.rows)


class _ManualProvider:
    """Each fetch waits on its own future so tests decide the resolve order."""

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self.pending: list[asyncio.Future] = []

    async def fetch(self, criteria):
        self.calls.append(dict(criteria))
        fut = asyncio.get_running_loop().create_future()
        self.pending.append(fut)
        return await fut


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


class SearchListControllerTests(unittest.IsolatedAsyncioTestCase):
    def _controller(self, provider, **kwargs) -> SearchListController:
        kwargs.setdefault("filter_fields", ("name", "category"))
        return SearchListController(provider, **kwargs)

    async def test_initial_state(self) -> None:
        ctrl = self._controller(_StaticProvider())
        self.assertEqual(ctrl.criteria, {"name": None, "category": None})
        self.assertEqual(ctrl.result_set, ())
        self.assertIsNone(ctrl.selected_record)
        self.assertFalse(ctrl.busy)
        self.assertFalse(ctrl.has_searched)
        self.assertEqual(ctrl.visible_rows, [])
        info = ctrl.page_info
        self.assertEqual((info.current_page, info.total_pages, info.total_count), (1, 1, 0))

    def test_page_size_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            SearchListController(_StaticProvider(), page_size=0)

    async def test_blank_criteria_send_empty_query(self) -> None:
        provider = _StaticProvider(_rows(3))
        ctrl = self._controller(provider)
        ctrl.update_filter("name", "   ")
        ctrl.update_filter("category", "")

        self.assertTrue(await ctrl.search())
        self.assertEqual(provider.calls, [{}])
        self.assertEqual(len(ctrl.result_set), 3)

    async def test_search_sends_trimmed_values_only(self) -> None:
        provider = _StaticProvider(_rows(1))
        ctrl = self._controller(provider)
        ctrl.update_filter("name", "  para ")

        await ctrl.search()

        self.assertEqual(provider.calls, [{"name": "para"}])
        self.assertEqual(ctrl.criteria["name"], "para")

    async def test_fetch_all_ignores_criteria(self) -> None:
        provider = _StaticProvider(_rows(2))
        ctrl = self._controller(provider)
        ctrl.update_filter("name", "para")

        await ctrl.fetch_all()

        self.assertEqual(provider.calls, [{}])
        self.assertEqual(ctrl.criteria["name"], "para")

    async def test_pagination_partitions_result_set(self) -> None:
        ctrl = self._controller(_StaticProvider(_rows(32)), page_size=15)
        await ctrl.fetch_all()

        self.assertEqual(ctrl.total_pages, 3)
        self.assertEqual(len(ctrl.visible_rows), 15)

        ctrl.go_to_page(3)
        self.assertEqual(ctrl.current_page, 3)
        self.assertEqual([r["id"] for r in ctrl.visible_rows], ["31", "32"])

        seen = []
        for page in range(1, ctrl.total_pages + 1):
            ctrl.go_to_page(page)
            seen.extend(ctrl.visible_rows)
        self.assertEqual(seen, list(ctrl.result_set))

    async def test_go_to_page_clamps(self) -> None:
        ctrl = self._controller(_StaticProvider(_rows(32)), page_size=15)
        await ctrl.fetch_all()

        ctrl.go_to_page(99)
        self.assertEqual(ctrl.current_page, 3)
        ctrl.go_to_page(0)
        self.assertEqual(ctrl.current_page, 1)
        ctrl.go_to_page(-4)
        self.assertEqual(ctrl.current_page, 1)

    async def test_empty_result_still_has_one_page(self) -> None:
        ctrl = self._controller(_StaticProvider([]))
        await ctrl.search()
        self.assertTrue(ctrl.has_searched)
        self.assertEqual(ctrl.total_pages, 1)
        self.assertEqual(ctrl.visible_rows, [])

    async def test_successful_fetch_returns_to_first_page(self) -> None:
        ctrl = self._controller(_StaticProvider(_rows(40)), page_size=10)
        await ctrl.fetch_all()
        ctrl.go_to_page(4)

        await ctrl.search()
        self.assertEqual(ctrl.current_page, 1)

    async def test_local_text_filter_preserves_order_and_restores(self) -> None:
        rows = [
            {"id": "1", "name": "Paracetamol"},
            {"id": "2", "name": "Aspirin"},
            {"id": "3", "name": "PARACETAMOL syrup"},
            {"id": "4"},
        ]
        ctrl = self._controller(_StaticProvider(rows))
        await ctrl.fetch_all()

        ctrl.set_local_text_filter("paracet")
        self.assertEqual([r["id"] for r in ctrl.filtered_rows], ["1", "3"])
        self.assertEqual(ctrl.page_info.total_count, 2)
        self.assertEqual(len(ctrl.result_set), 4)

        ctrl.set_local_text_filter("")
        self.assertEqual(list(ctrl.filtered_rows), list(ctrl.result_set))

    async def test_local_filter_reclamps_page(self) -> None:
        rows = _rows(30, prefix="Tab") + _rows(2, prefix="Syrup")
        ctrl = self._controller(_StaticProvider(rows), page_size=10)
        await ctrl.fetch_all()
        ctrl.go_to_page(4)

        ctrl.set_local_text_filter("syrup")

        self.assertEqual(ctrl.current_page, 1)
        self.assertEqual(len(ctrl.visible_rows), 2)

    async def test_failed_fetch_keeps_previous_rows(self) -> None:
        provider = _StaticProvider(_rows(5))
        notified: list[str] = []
        ctrl = self._controller(provider, title="bills", notify=notified.append)
        await ctrl.fetch_all()
        before = ctrl.result_set

        provider.error = ProviderError("timeout")
        self.assertFalse(await ctrl.search())

        self.assertIs(ctrl.result_set, before)
        self.assertFalse(ctrl.busy)
        self.assertEqual(len(notified), 1)
        self.assertIn("bills", notified[0])
        self.assertIn("timeout", notified[0])
        self.assertEqual(ctrl.notifications, notified)

    async def test_unexpected_error_is_reported_generically(self) -> None:
        notified: list[str] = []
        ctrl = self._controller(_StaticProvider(error=RuntimeError("boom")), notify=notified.append)

        self.assertFalse(await ctrl.fetch_all())

        self.assertFalse(ctrl.busy)
        self.assertEqual(notified, ["An unexpected error occurred"])

    async def test_busy_during_fetch(self) -> None:
        provider = _ManualProvider()
        ctrl = self._controller(provider)

        task = asyncio.create_task(ctrl.search())
        await _settle()
        self.assertTrue(ctrl.busy)

        provider.pending[0].set_result(_rows(1))
        await task
        self.assertFalse(ctrl.busy)

    async def test_busy_cleared_on_failure(self) -> None:
        provider = _ManualProvider()
        ctrl = self._controller(provider)

        task = asyncio.create_task(ctrl.search())
        await _settle()
        provider.pending[0].set_exception(ProviderError("down", status=503))
        await task

        self.assertFalse(ctrl.busy)

    async def test_overlapping_fetches_last_resolved_wins(self) -> None:
        provider = _ManualProvider()
        ctrl = self._controller(provider)

        first = asyncio.create_task(ctrl.search())
        await _settle()
        second = asyncio.create_task(ctrl.fetch_all())
        await _settle()
        self.assertEqual(len(provider.pending), 2)

        provider.pending[1].set_result([{"id": "second"}])
        await second
        self.assertTrue(ctrl.busy)

        provider.pending[0].set_result([{"id": "first"}])
        await first

        self.assertEqual(ctrl.result_set, ({"id": "first"},))
        self.assertFalse(ctrl.busy)

    async def test_stale_responses_can_be_ignored(self) -> None:
        provider = _ManualProvider()
        ctrl = self._controller(provider, ignore_stale_responses=True)

        first = asyncio.create_task(ctrl.search())
        await _settle()
        second = asyncio.create_task(ctrl.fetch_all())
        await _settle()

        provider.pending[1].set_result([{"id": "second"}])
        self.assertTrue(await second)
        provider.pending[0].set_result([{"id": "first"}])
        self.assertFalse(await first)

        self.assertEqual(ctrl.result_set, ({"id": "second"},))

    async def test_select_and_clear(self) -> None:
        ctrl = self._controller(_StaticProvider(_rows(3)))
        await ctrl.fetch_all()
        row = ctrl.result_set[1]

        ctrl.select_record(row)
        self.assertIs(ctrl.selected_record, row)

        ctrl.clear_selection()
        self.assertIsNone(ctrl.selected_record)

    async def test_select_foreign_row_raises(self) -> None:
        ctrl = self._controller(_StaticProvider(_rows(3)))
        await ctrl.fetch_all()

        with self.assertRaises(ValueError):
            ctrl.select_record({"id": "1", "name": "Item 1"})

    async def test_new_results_clear_selection(self) -> None:
        ctrl = self._controller(_StaticProvider(_rows(3)))
        await ctrl.fetch_all()
        ctrl.select_record(ctrl.result_set[0])

        await ctrl.search()
        self.assertIsNone(ctrl.selected_record)

    async def test_reset_restores_initial_state(self) -> None:
        ctrl = self._controller(_StaticProvider(_rows(20)), page_size=5)
        ctrl.update_filter("name", "Item")
        await ctrl.search()
        ctrl.go_to_page(3)
        ctrl.set_local_text_filter("1")
        ctrl.select_record(ctrl.result_set[0])

        ctrl.reset()

        self.assertEqual(ctrl.criteria, {"name": None, "category": None})
        self.assertEqual(ctrl.result_set, ())
        self.assertIsNone(ctrl.selected_record)
        self.assertEqual(ctrl.local_text_filter, "")
        self.assertEqual(ctrl.current_page, 1)
        self.assertFalse(ctrl.has_searched)

        ctrl.reset()
        self.assertEqual(ctrl.criteria, {"name": None, "category": None})
        self.assertEqual(ctrl.result_set, ())

    async def test_late_response_after_reset_is_applied(self) -> None:
        provider = _ManualProvider()
        ctrl = self._controller(provider)

        task = asyncio.create_task(ctrl.fetch_all())
        await _settle()
        ctrl.reset()
        self.assertFalse(ctrl.has_searched)

        provider.pending[0].set_result([{"id": "late"}])
        self.assertTrue(await task)

        self.assertEqual(ctrl.result_set, ({"id": "late"},))
        self.assertFalse(ctrl.busy)
        self.assertTrue(ctrl.has_searched)

    def test_exposes_provider(self) -> None:
        provider = _StaticProvider()
        self.assertIs(self._controller(provider).provider, provider)

    async def test_require_criteria_blocks_empty_search(self) -> None:
        provider = _StaticProvider(_rows(2))
        notified: list[str] = []
        ctrl = self._controller(
            provider,
            require_criteria=True,
            missing_criteria_message="Enter supplier name to search",
            notify=notified.append,
        )

        self.assertFalse(await ctrl.search())
        self.assertEqual(provider.calls, [])
        self.assertEqual(notified, ["Enter supplier name to search"])

        self.assertTrue(await ctrl.fetch_all())
        self.assertEqual(provider.calls, [{}])

    async def test_listeners_notified_and_unsubscribed(self) -> None:
        ctrl = self._controller(_StaticProvider(_rows(2)))
        calls: list[int] = []
        unsubscribe = ctrl.on_change(lambda: calls.append(1))

        await ctrl.fetch_all()
        self.assertGreaterEqual(len(calls), 2)

        unsubscribe()
        count = len(calls)
        ctrl.go_to_page(1)
        self.assertEqual(len(calls), count)

    async def test_failing_listener_does_not_break_fetch(self) -> None:
        ctrl = self._controller(_StaticProvider(_rows(2)))

        def broken() -> None:
            raise RuntimeError("listener")

        ctrl.on_change(broken)
        self.assertTrue(await ctrl.fetch_all())
        self.assertEqual(len(ctrl.result_set), 2)


if __name__ == "__main__":
    unittest.main()

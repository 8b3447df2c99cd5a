from __future__ import annotations

import unittest

from services.screens import SCREENS, get_screen


class ScreenCatalogTests(unittest.TestCase):
    def test_page_sizes(self) -> None:
        self.assertEqual(
            {key: screen.page_size for key, screen in SCREENS.items()},
            {
                "inventory": 14, "bills": 14, "distributors": 15, "purchase_orders": 10,
                "receive_orders": 14, "issue_orders": 14, "customers": 10,
            },
        )

    def test_only_distributors_require_criteria(self) -> None:
        required = [key for key, screen in SCREENS.items() if screen.require_criteria]
        self.assertEqual(required, ["distributors"])

    def test_filter_names_are_unique(self) -> None:
        for screen in SCREENS.values():
            self.assertEqual(len(screen.filter_names), len(set(screen.filter_names)), screen.key)

    def test_page_size_override(self) -> None:
        screen = get_screen("bills")
        self.assertIs(screen.with_page_size(None), screen)
        self.assertEqual(screen.with_page_size(25).page_size, 25)
        self.assertEqual(screen.page_size, 14)

    def test_column_display_uses_key_variants(self) -> None:
        screen = get_screen("inventory")
        col = next(c for c in screen.columns if c.name == "item_name")
        self.assertEqual(col.display({"itemName": "Aspirin"}), "Aspirin")
        self.assertEqual(col.display({}), "-")

    def test_customer_name_column_joins_first_and_last(self) -> None:
        screen = get_screen("customers")
        col = next(c for c in screen.columns if c.name == "name")
        self.assertEqual(col.display({"first_name": "Asha", "last_name": "Verma"}), "Asha Verma")
        self.assertEqual(col.display({"first_name": "Asha", "last_name": None}), "Asha")
        self.assertEqual(col.display({}), "-")

    def test_customer_name_filter_covers_last_name(self) -> None:
        name = next(f for f in get_screen("customers").filters if f.name == "name")
        self.assertEqual((name.column, name.also), ("first_name", ("last_name",)))

    def test_order_screens_list_their_items(self) -> None:
        parents = {
            key: [(s.collection, s.parent_column) for s in SCREENS[key].detail_sections]
            for key in ("purchase_orders", "receive_orders", "issue_orders")
        }
        self.assertEqual(parents, {
            "purchase_orders": [
                ("purchase_order_items", "purchase_order_id"),
                ("purchase_order_payments", "purchase_order_id"),
            ],
            "receive_orders": [("receive_order_items", "receive_order_id")],
            "issue_orders": [("issue_order_items", "issue_order_id")],
        })
        self.assertEqual(SCREENS["customers"].detail_sections, ())

    def test_unknown_screen(self) -> None:
        with self.assertRaises(KeyError):
            get_screen("reports")


if __name__ == "__main__":
    unittest.main()

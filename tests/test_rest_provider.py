from __future__ import annotations

import unittest
from datetime import date
from unittest import mock

import requests

from services.data_provider import FieldKind, FilterField, MatchOp, ProviderError
from services.rest_provider import RestDataProvider


FIELDS = (
    FilterField("patientName", "patient_name"),
    FilterField("date", "bill_date", op=MatchOp.EQ, kind=FieldKind.DATE),
)


def _response(status: int = 200, payload=None, json_error: bool = False) -> mock.Mock:
    resp = mock.Mock()
    resp.status_code = status
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


class _FakeHttp:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.sess = mock.Mock()
        if error is not None:
            self.sess.get.side_effect = error
        else:
            self.sess.get.return_value = response

    def session(self):
        return self.sess


class RestDataProviderTests(unittest.IsolatedAsyncioTestCase):
    def _provider(self, http, **kwargs) -> RestDataProvider:
        kwargs.setdefault("api_key", "secret")
        return RestDataProvider("https://db.example/rest/v1/", "bills", FIELDS, http=http, **kwargs)

    async def test_builds_query_params_and_headers(self) -> None:
        http = _FakeHttp(_response(payload=[{"id": "b1"}, "junk"]))
        provider = self._provider(http, order_by=("created_at", True), base_filters={"user_id": "u1"})

        rows = await provider.fetch({"patientName": " asha ", "date": date(2024, 5, 2), "phone": ""})

        self.assertEqual(rows, [{"id": "b1"}])
        args, kwargs = http.sess.get.call_args
        self.assertEqual(args[0], "https://db.example/rest/v1/bills")
        self.assertEqual(
            kwargs["params"],
            [
                ("select", "*"),
                ("user_id", "eq.u1"),
                ("patient_name", "ilike.*asha*"),
                ("bill_date", "eq.2024-05-02"),
                ("order", "created_at.desc"),
            ],
        )
        self.assertEqual(kwargs["headers"]["apikey"], "secret")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer secret")
        self.assertEqual(kwargs["timeout"], 10.0)

    async def test_fetch_children_queries_child_collection(self) -> None:
        http = _FakeHttp(_response(payload=[{"id": "poi1", "purchase_order_id": "p1"}]))
        provider = self._provider(http, order_by=("created_at", True))

        rows = await provider.fetch_children("purchase_order_items", "purchase_order_id", "p1")

        self.assertEqual(rows, [{"id": "poi1", "purchase_order_id": "p1"}])
        args, kwargs = http.sess.get.call_args
        self.assertEqual(args[0], "https://db.example/rest/v1/purchase_order_items")
        self.assertEqual(kwargs["params"], [("select", "*"), ("purchase_order_id", "eq.p1")])

    async def test_child_error_names_child_collection(self) -> None:
        http = _FakeHttp(_response(status=404, payload={"message": "relation does not exist"}))
        with self.assertRaises(ProviderError) as ctx:
            await self._provider(http).fetch_children("purchase_order_payments", "purchase_order_id", "p1")
        self.assertIn("purchase_order_payments", str(ctx.exception))

    def test_or_filter_over_several_columns(self) -> None:
        fields = (FilterField("name", "first_name", also=("last_name",)),)
        provider = RestDataProvider("https://db.example/rest/v1", "profiles", fields, http=_FakeHttp())
        self.assertEqual(
            provider.build_params({"name": "mehta"}),
            [("select", "*"), ("or", "(first_name.ilike.*mehta*,last_name.ilike.*mehta*)")],
        )

    def test_no_key_means_no_auth_headers(self) -> None:
        provider = self._provider(_FakeHttp(), api_key="")
        self.assertNotIn("Authorization", provider.headers())
        self.assertNotIn("apikey", provider.headers())

    async def test_error_status_raises_with_backend_message(self) -> None:
        http = _FakeHttp(_response(status=400, payload={"message": "column does not exist"}))
        with self.assertRaises(ProviderError) as ctx:
            await self._provider(http).fetch({})
        self.assertEqual(ctx.exception.status, 400)
        self.assertIn("column does not exist", str(ctx.exception))

    async def test_transport_error_raises_provider_error(self) -> None:
        http = _FakeHttp(error=requests.ConnectionError("refused"))
        with self.assertRaises(ProviderError) as ctx:
            await self._provider(http).fetch({})
        self.assertIsNone(ctx.exception.status)
        self.assertIsInstance(ctx.exception.__cause__, requests.ConnectionError)

    async def test_invalid_json_raises(self) -> None:
        http = _FakeHttp(_response(json_error=True))
        with self.assertRaises(ProviderError):
            await self._provider(http).fetch({})

    async def test_non_list_body_raises(self) -> None:
        http = _FakeHttp(_response(payload={"rows": []}))
        with self.assertRaises(ProviderError):
            await self._provider(http).fetch({})

    async def test_missing_base_url_raises(self) -> None:
        provider = RestDataProvider("", "bills", FIELDS, http=_FakeHttp())
        with self.assertRaises(ProviderError):
            await provider.fetch({})


if __name__ == "__main__":
    unittest.main()

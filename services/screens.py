from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from services.data_provider import FieldKind, FilterField, MatchOp
from services.record_fields import format_value, get_val


@dataclass(frozen=True)
class Column:
	"""One displayed value: label plus the key variants it is read from."""
	name: str
	label: str
	keys: tuple[str, ...]
	kind: str = "text"
	# join every non-empty key instead of taking the first one
	combine: bool = False

	def value(self, row: Mapping[str, Any]) -> Any:
		if self.combine:
			parts = [str(row.get(k)) for k in self.keys if row.get(k) not in (None, "")]
			return " ".join(parts) or None
		return get_val(row, self.keys, None)

	def display(self, row: Mapping[str, Any]) -> str:
		return format_value(self.value(row), self.kind)


@dataclass(frozen=True)
class DetailSection:
	"""Child rows shown under a record, e.g. the line items of an order."""
	key: str
	title: str
	collection: str
	parent_column: str
	columns: tuple[Column, ...]
	# money column summed into the section total
	total_column: Optional[str] = None
	empty_message: str = "No rows found"


@dataclass(frozen=True)
class ScreenSpec:
	key: str
	title: str
	icon: str
	collection: str
	filters: tuple[FilterField, ...]
	columns: tuple[Column, ...]
	detail_fields: tuple[Column, ...]
	id_fields: tuple[str, ...] = ("id",)
	text_filter_fields: tuple[str, ...] = ("name",)
	text_filter_label: str = "Filter"
	page_size: int = 15
	order_by: Optional[tuple[str, bool]] = None
	require_criteria: bool = False
	missing_criteria_message: str = "Enter a search value"
	empty_message: str = "No records found."
	detail_sections: tuple[DetailSection, ...] = ()

	@property
	def filter_names(self) -> tuple[str, ...]:
		return tuple(f.name for f in self.filters)

	def with_page_size(self, page_size: int | None) -> "ScreenSpec":
		if not page_size:
			return self
		return replace(self, page_size=int(page_size))


_ITEM_ID = ("item_id", "itemId", "id")
_ITEM_NAME = ("item_name", "itemName", "name")

INVENTORY = ScreenSpec(
	key="inventory",
	title="Get Inventory",
	icon="inventory_2",
	collection="inventory",
	filters=(
		FilterField("itemName", "item_name", label="Item Name"),
		FilterField("category", "category", label="Category"),
	),
	columns=(
		Column("item_id", "Item ID", _ITEM_ID),
		Column("item_name", "Item Name", _ITEM_NAME),
		Column("category", "Category", ("category", "Category")),
		Column("unit", "Unit", ("unit", "Unit")),
		Column("stock", "Total Stock", ("stock", "quantity", "qty")),
	),
	detail_fields=(
		Column("item_id", "Item ID", _ITEM_ID),
		Column("item_name", "Item Name", _ITEM_NAME),
		Column("category", "Category", ("category", "Category")),
		Column("batch_no", "Batch No", ("batch_no", "batchNo", "batch")),
		Column("unit", "Unit", ("unit", "Unit")),
		Column("stock", "Stock", ("stock", "quantity", "qty")),
		Column("min_stock", "Minimum Stock", ("min_stock", "minStock", "minstock")),
		Column("rack", "Rack", ("rack", "Rack")),
		Column("product_type", "Product type", ("product_type", "productType")),
		Column("price", "Price", ("price", "amount"), kind="money"),
		Column("gst", "GST", ("gst", "GST")),
	),
	id_fields=_ITEM_ID,
	text_filter_fields=_ITEM_NAME,
	text_filter_label="Filter by item name",
	page_size=14,
	order_by=("item_name", False),
	empty_message="No inventory items found.",
)

BILLS = ScreenSpec(
	key="bills",
	title="Get Bills",
	icon="receipt_long",
	collection="bills",
	filters=(
		FilterField("billId", "bill_number", label="Bill ID"),
		FilterField("patientName", "patient_name", label="Patient Name"),
		FilterField("phone", "patient_phone", label="Phone number"),
		FilterField("date", "bill_date", op=MatchOp.EQ, kind=FieldKind.DATE, label="Bill date"),
	),
	columns=(
		Column("bill_number", "Bill Number", ("bill_number",)),
		Column("patient_name", "Patient Name", ("patient_name",)),
		Column("patient_phone", "Phone", ("patient_phone",)),
		Column("bill_date", "Bill Date", ("bill_date",), kind="date"),
		Column("total_amount", "Total Amount", ("total_amount",), kind="money"),
		Column("payment_status", "Payment Status", ("payment_status",)),
	),
	detail_fields=(
		Column("bill_number", "Bill Number", ("bill_number",)),
		Column("bill_date", "Bill Date", ("bill_date",), kind="date"),
		Column("payment_status", "Payment Status", ("payment_status",)),
		Column("patient_name", "Name", ("patient_name",)),
		Column("patient_phone", "Phone", ("patient_phone",)),
		Column("total_amount", "Total Amount", ("total_amount",), kind="money"),
	),
	id_fields=("id", "bill_number"),
	text_filter_fields=("patient_name",),
	text_filter_label="Search patient",
	page_size=14,
	order_by=("created_at", True),
	empty_message="No bills found.",
)

DISTRIBUTORS = ScreenSpec(
	key="distributors",
	title="Get Distributor List",
	icon="local_shipping",
	collection="distributors",
	filters=(
		FilterField("supplierName", "supplier_name", label="Supplier Name"),
	),
	columns=(
		Column("supplier_name", "Supplier Name", ("supplier_name",)),
		Column("phone_number", "Phone Number", ("phone_number",)),
		Column("email", "Email", ("email",)),
		Column("address", "Address", ("address",)),
	),
	detail_fields=(
		Column("supplier_name", "Supplier Name", ("supplier_name",)),
		Column("phone_number", "Phone Number", ("phone_number",)),
		Column("email", "Email", ("email",)),
		Column("address", "Address", ("address",)),
		Column("remark", "Remark", ("remark",)),
	),
	id_fields=("id",),
	text_filter_fields=("supplier_name",),
	text_filter_label="Filter by supplier",
	page_size=15,
	order_by=("supplier_name", False),
	require_criteria=True,
	missing_criteria_message="Enter supplier name to search",
	empty_message="No distributors found.",
)

_PO_COLUMNS = (
	Column("supplier_id", "Purchase ID", ("supplier_id", "purchase_order_no")),
	Column("supplier_name", "Supplier Name", ("supplier_name", "supplierName", "supplier")),
	Column("requisition_date", "Requisition Date", ("requisition_date", "order_date"), kind="date"),
	Column("expected_date", "Expected Date", ("expected_date",), kind="date"),
	Column("status", "Status", ("status",)),
)

PURCHASE_ORDERS = ScreenSpec(
	key="purchase_orders",
	title="Get Purchase Orders",
	icon="shopping_cart",
	collection="purchase_orders",
	filters=(
		FilterField("purchaseId", "supplier_id", label="Purchase ID"),
		FilterField("vendorName", "supplier_name", label="Vendor Name"),
		FilterField("fromDate", "requisition_date", op=MatchOp.GTE, kind=FieldKind.DATE, label="From date"),
		FilterField("toDate", "requisition_date", op=MatchOp.LTE, kind=FieldKind.DATE, label="To date"),
	),
	columns=_PO_COLUMNS,
	detail_fields=_PO_COLUMNS,
	id_fields=("id", "supplier_id"),
	text_filter_fields=("supplier_name", "supplierName", "supplier"),
	text_filter_label="Filter by supplier",
	page_size=10,
	order_by=("created_at", True),
	empty_message="No purchase orders found.",
	detail_sections=(
		DetailSection(
			key="items",
			title="Item Details",
			collection="purchase_order_items",
			parent_column="purchase_order_id",
			columns=(
				Column("item_name", "Item Name", _ITEM_NAME),
				Column("quantity", "Quantity", ("quantity", "qty", "receivedQty", "received_quantity")),
				Column("category", "Category", ("category",)),
				Column("unit_price", "Unit Price", ("unit_price", "unitPrice", "price", "rate"), kind="money"),
				Column("unit", "Unit", ("unit",)),
				Column("total_price", "Total Price", ("total_price", "totalPrice", "total"), kind="money"),
				Column("remark", "Remark", ("remark", "notes")),
			),
			empty_message="No items found",
		),
		DetailSection(
			key="payments",
			title="Payment Details",
			collection="purchase_order_payments",
			parent_column="purchase_order_id",
			columns=(
				Column("amount", "Amount", ("amount", "value"), kind="money"),
				Column("payment_method", "Payment Method", ("payment_method", "method")),
				Column("payment_status", "Payment Status", ("payment_status", "status")),
			),
			total_column="amount",
			empty_message="No payments found",
		),
	),
)

_RECEIVE_COLUMNS = (
	Column("id", "Receive ID", ("id",)),
	Column("purchase_id", "Purchase ID", ("purchase_id", "purchaseId")),
	Column("vendor_name", "Vendor Name", ("vendor_name", "vendorName")),
	Column("payment_status", "Payment Status", ("payment_status", "paymentStatus")),
	Column("created_at", "Created At", ("created_at", "createdAt"), kind="date"),
)

RECEIVE_ORDERS = ScreenSpec(
	key="receive_orders",
	title="Get Receive Orders",
	icon="move_to_inbox",
	collection="receive_orders",
	filters=(
		FilterField("receiveId", "id", label="Receive ID"),
		FilterField("fromDate", "created_at", op=MatchOp.GTE, kind=FieldKind.DATE, label="From date"),
		FilterField("toDate", "created_at", op=MatchOp.LTE, kind=FieldKind.DATE, label="To date"),
	),
	columns=_RECEIVE_COLUMNS,
	detail_fields=_RECEIVE_COLUMNS,
	id_fields=("id",),
	text_filter_fields=("vendor_name", "vendorName"),
	text_filter_label="Filter by vendor",
	page_size=14,
	order_by=("created_at", True),
	empty_message="No receive orders found",
	detail_sections=(
		DetailSection(
			key="items",
			title="Item Details",
			collection="receive_order_items",
			parent_column="receive_order_id",
			columns=(
				Column("item_name", "Item Name", ("item_name", "itemName", "name", "product_name")),
				Column("received_quantity", "Quantity", ("received_quantity", "receivedQuantity", "qty", "quantity")),
				Column("unit", "Unit", ("unit", "uom", "pack")),
				Column("price_per_quantity", "Price", ("price_per_quantity", "pricePerQuantity", "price", "rate"),
					   kind="money"),
				Column("batch_no", "Batch No", ("batch_no", "batchNo", "batch")),
				Column("gst", "GST", ("gst", "tax")),
				Column("remark", "Reason", ("remark", "reason", "notes")),
			),
			empty_message="No items found",
		),
	),
)

_ISSUE_COLUMNS = (
	Column("id", "Issue ID", ("id",)),
	Column("employee_type", "Employee Type", ("employee_type",)),
	Column("employee_name", "Employee Name", ("employee_name",)),
	Column("issue_date", "Issue Date", ("issue_date",), kind="date"),
	Column("created_at", "Created At", ("created_at",), kind="date"),
	Column("remark", "Remark", ("remark",)),
)

ISSUE_ORDERS = ScreenSpec(
	key="issue_orders",
	title="Get Issue Orders",
	icon="outbox",
	collection="issue_orders",
	filters=(
		FilterField("issueId", "id", label="Issue ID"),
		FilterField("fromDate", "issue_date", op=MatchOp.GTE, kind=FieldKind.DATE, label="From date"),
		FilterField("toDate", "issue_date", op=MatchOp.LTE, kind=FieldKind.DATE, label="To date"),
	),
	columns=_ISSUE_COLUMNS,
	detail_fields=_ISSUE_COLUMNS,
	id_fields=("id",),
	text_filter_fields=("employee_name",),
	text_filter_label="Filter by employee",
	page_size=14,
	order_by=("created_at", True),
	empty_message="No issue orders found",
	detail_sections=(
		DetailSection(
			key="items",
			title="Item Details",
			collection="issue_order_items",
			parent_column="issue_order_id",
			columns=(
				Column("item_id", "Item ID", ("item_id",)),
				Column("item_name", "Item Name", ("item_name",)),
				Column("quantity", "Quantity", ("quantity",)),
				Column("remark", "Remark", ("remark",)),
			),
			empty_message="No items found",
		),
	),
)

_CUSTOMER_COLUMNS = (
	Column("name", "Name", ("first_name", "last_name"), combine=True),
	Column("phone", "Phone Number", ("phone",)),
	Column("age", "Age", ("age",)),
	Column("gender", "Gender", ("gender",)),
	Column("created_at", "Created At", ("created_at",), kind="date"),
)

CUSTOMERS = ScreenSpec(
	key="customers",
	title="Customer List",
	icon="groups",
	collection="profiles",
	filters=(
		FilterField("name", "first_name", also=("last_name",), label="Customer Name"),
		FilterField("phone", "phone", label="Customer Phone Number"),
	),
	columns=_CUSTOMER_COLUMNS,
	detail_fields=_CUSTOMER_COLUMNS,
	id_fields=("id",),
	text_filter_fields=("first_name",),
	text_filter_label="Filter by first name",
	page_size=10,
	order_by=("created_at", True),
	empty_message="No customers found",
)


SCREENS: dict[str, ScreenSpec] = {
	s.key: s for s in (INVENTORY, BILLS, DISTRIBUTORS, PURCHASE_ORDERS, RECEIVE_ORDERS, ISSUE_ORDERS, CUSTOMERS)
}


def get_screen(key: str) -> ScreenSpec:
	try:
		return SCREENS[key]
	except KeyError:
		raise KeyError(f"Unknown screen: {key}") from None

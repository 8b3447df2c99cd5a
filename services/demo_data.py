from __future__ import annotations

from copy import deepcopy
from typing import Any


# Seed rows for the local store, used until the host process writes real data.
DEMO_ROWS: dict[str, list[dict[str, Any]]] = {
	"inventory": [
		{"id": "1", "item_id": "MED001", "item_name": "Paracetamol 500mg", "category": "Analgesics",
		 "unit": "Tablets", "stock": 450, "batch_no": "BATCH-001", "min_stock": 100, "rack": "A1",
		 "product_type": "Tablet", "price": 50, "gst": "5%"},
		{"id": "2", "item_id": "MED002", "item_name": "Amoxicillin 250mg", "category": "Antibiotics",
		 "unit": "Capsules", "stock": 220, "batch_no": "BATCH-002", "min_stock": 50, "rack": "B2",
		 "product_type": "Capsule", "price": 120, "gst": "5%"},
		{"id": "3", "item_id": "MED003", "item_name": "Omeprazole 20mg", "category": "Gastrointestinal",
		 "unit": "Capsules", "stock": 300, "batch_no": "BATCH-003", "min_stock": 75, "rack": "C3",
		 "product_type": "Capsule", "price": 80, "gst": "5%"},
		{"id": "4", "item_id": "MED004", "item_name": "Metformin 500mg", "category": "Antidiabetics",
		 "unit": "Tablets", "stock": 650, "batch_no": "BATCH-004", "min_stock": 80, "rack": "D1",
		 "product_type": "Tablet", "price": 40, "gst": "5%"},
		{"id": "5", "item_id": "MED005", "item_name": "Aspirin 100mg", "category": "Analgesics",
		 "unit": "Tablets", "stock": 250, "batch_no": "BATCH-005", "min_stock": 120, "rack": "A2",
		 "product_type": "Tablet", "price": 30, "gst": "5%"},
	],
	"bills": [
		{"id": "b1", "bill_number": "BILL-1001", "patient_name": "Asha Verma", "patient_phone": "9876543210",
		 "total_amount": 420.5, "payment_status": "paid", "bill_date": "2024-05-02",
		 "created_at": "2024-05-02T10:15:00Z"},
		{"id": "b2", "bill_number": "BILL-1002", "patient_name": "Rahul Mehta", "patient_phone": None,
		 "total_amount": 96.0, "payment_status": "pending", "bill_date": "2024-05-03",
		 "created_at": "2024-05-03T09:02:00Z"},
		{"id": "b3", "bill_number": "BILL-1003", "patient_name": "Asha Verma", "patient_phone": "9876543210",
		 "total_amount": 1250.0, "payment_status": "paid", "bill_date": "2024-05-07",
		 "created_at": "2024-05-07T17:40:00Z"},
	],
	"distributors": [
		{"id": "d1", "supplier_name": "Sun Pharma Distributors", "phone_number": "02266455645",
		 "email": "orders@sundist.example", "address": "Andheri East, Mumbai", "remark": None},
		{"id": "d2", "supplier_name": "MedLine Traders", "phone_number": "08041234567",
		 "email": None, "address": "Jayanagar, Bengaluru", "remark": "Weekly delivery"},
	],
	"purchase_orders": [
		{"id": "p1", "supplier_id": "PO-2024-001", "supplier_name": "Sun Pharma Distributors",
		 "requisition_date": "2024-04-28", "expected_date": "2024-05-05", "status": "received",
		 "created_at": "2024-04-28T08:00:00Z"},
		{"id": "p2", "supplier_id": "PO-2024-002", "supplier_name": "MedLine Traders",
		 "requisition_date": "2024-05-06", "expected_date": "2024-05-12", "status": "pending",
		 "created_at": "2024-05-06T11:30:00Z"},
	],
	"purchase_order_items": [
		{"id": "poi1", "purchase_order_id": "p1", "item_name": "Paracetamol 500mg", "quantity": 200,
		 "category": "Analgesics", "unit_price": 1.5, "unit": "Tablets", "total_price": 300, "remark": None},
		{"id": "poi2", "purchase_order_id": "p1", "item_name": "Aspirin 100mg", "quantity": 100,
		 "category": "Analgesics", "unit_price": 0.9, "unit": "Tablets", "total_price": 90, "remark": "Urgent"},
		{"id": "poi3", "purchase_order_id": "p2", "item_name": "Amoxicillin 250mg", "quantity": 60,
		 "category": "Antibiotics", "unit_price": 4, "unit": "Capsules", "total_price": 240, "remark": None},
	],
	"purchase_order_payments": [
		{"id": "pay1", "purchase_order_id": "p1", "amount": 250, "payment_method": "UPI", "payment_status": "paid"},
		{"id": "pay2", "purchase_order_id": "p1", "amount": 140, "payment_method": "Cash", "payment_status": "paid"},
	],
	"receive_orders": [
		{"id": "r1", "purchase_id": "p1", "vendor_name": "Sun Pharma Distributors", "payment_status": "paid",
		 "created_at": "2024-05-05T14:10:00Z"},
		{"id": "r2", "purchase_id": "p2", "vendor_name": "MedLine Traders", "payment_status": "pending",
		 "created_at": "2024-05-12T10:00:00Z"},
	],
	"receive_order_items": [
		{"id": "ri1", "receive_order_id": "r1", "item_name": "Paracetamol 500mg", "received_quantity": 200,
		 "unit": "Tablets", "price_per_quantity": 1.5, "batch_no": "BATCH-001", "gst": "5%", "remark": None},
		{"id": "ri2", "receive_order_id": "r2", "item_name": "Amoxicillin 250mg", "received_quantity": 58,
		 "unit": "Capsules", "price_per_quantity": 4, "batch_no": "BATCH-002", "gst": "5%", "remark": "2 damaged"},
	],
	"issue_orders": [
		{"id": "i1", "employee_type": "Nurse", "employee_name": "Kavita Rao", "issue_date": "2024-05-08",
		 "remark": "Ward 3", "created_at": "2024-05-08T08:45:00Z"},
	],
	"issue_order_items": [
		{"id": "ii1", "issue_order_id": "i1", "item_id": "MED001", "item_name": "Paracetamol 500mg",
		 "quantity": 20, "remark": None},
		{"id": "ii2", "issue_order_id": "i1", "item_id": "MED003", "item_name": "Omeprazole 20mg",
		 "quantity": 10, "remark": None},
	],
	"profiles": [
		{"id": "c1", "first_name": "Asha", "last_name": "Verma", "phone": "9876543210", "age": 34,
		 "gender": "Female", "created_at": "2024-04-02T09:00:00Z"},
		{"id": "c2", "first_name": "Rahul", "last_name": "Mehta", "phone": "9123456780", "age": None,
		 "gender": "Male", "created_at": "2024-04-20T16:20:00Z"},
	],
}


def demo_rows(collection: str) -> list[dict[str, Any]]:
	return deepcopy(DEMO_ROWS.get(collection, []))

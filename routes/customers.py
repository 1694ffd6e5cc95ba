"""
Customer endpoints.

Email uniqueness is checked before every insert/update (excluding the record
being updated) and again by the unique index; both report the same 400.
"""
from typing import Optional

from fastapi import APIRouter, Query

from errors import bad_request, failure_message, not_found
from repositories import CustomerRepository
from routes.common import list_filter, merge_changes, paginated
from schemas import Customer, CustomerCreate, CustomerUpdate
from serializers import format_customer

router = APIRouter(prefix="/api/customers", tags=["Customers"])
customers = CustomerRepository()


@router.get("")
def list_customers(
    search: Optional[str] = None,
    sortBy: str = "name",
    sortOrder: str = "asc",
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1),
):
    with failure_message("Failed to fetch customers"):
        query = list_filter(customers, search)
        return paginated(customers, query, sortBy, sortOrder, page, limit, format_customer)


@router.post("", status_code=201)
def create_customer(payload: CustomerCreate):
    with failure_message("Failed to create customer"):
        customer = Customer.validate_document(payload.model_dump())
        if customers.email_taken(customer.email):
            raise bad_request(customers.duplicate_message)
        doc = customers.create(customer.to_document())
        return {"success": True, "data": format_customer(doc)}


@router.get("/{customer_id}")
def get_customer(customer_id: str):
    with failure_message("Failed to fetch customer"):
        doc = customers.get_or_404(customers.parse_id(customer_id))
        return {"success": True, "data": format_customer(doc)}


@router.put("/{customer_id}")
def update_customer(customer_id: str, payload: CustomerUpdate):
    with failure_message("Failed to update customer"):
        oid = customers.parse_id(customer_id)
        existing = customers.get_or_404(oid)
        customer, changes = merge_changes(Customer, existing, payload.model_dump(exclude_unset=True))
        if "email" in changes and customers.email_taken(customer.email, exclude=oid):
            raise bad_request(customers.duplicate_message)
        doc = customers.update(oid, changes)
        if not doc:
            raise not_found(customers.entity)
        return {"success": True, "data": format_customer(doc)}


@router.delete("/{customer_id}")
def delete_customer(customer_id: str):
    with failure_message("Failed to delete customer"):
        doc = customers.delete(customers.parse_id(customer_id))
        if not doc:
            raise not_found(customers.entity)
        return {"success": True, "message": "Customer deleted successfully", "data": format_customer(doc)}

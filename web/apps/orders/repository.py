"""Repository layer for persisting orders in MongoDB.

The repository is a thin pass-through over driver calls on the
``orders`` collection. It converts documents to plain dicts with a
string ``id`` so the controller and views never see ``bson`` types.
"""

from typing import Any, Mapping, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from .mongo import get_collection
from .validators import canonical_cpf

COLLECTION = "orders"

# Fields that identify a stored order and must never be overwritten.
IDENTIFIER_FIELDS = ("_id", "id")


def _serialize(doc: Mapping[str, Any]) -> dict:
    out = dict(doc)
    if "_id" in out:
        out["id"] = str(out.pop("_id"))
    return out


def _to_filter(query: Mapping[str, Any]) -> dict:
    """Translate an API-level query to a Mongo filter.

    ``id`` becomes ``_id`` and ``cpf`` is reduced to its digits-only form.
    """
    flt = dict(query)
    if "cpf" in flt:
        flt["cpf"] = canonical_cpf(flt["cpf"])
    if "id" in flt:
        oid = flt.pop("id")
        try:
            flt["_id"] = ObjectId(oid) if not isinstance(oid, ObjectId) else oid
        except (InvalidId, TypeError):
            flt["_id"] = oid
    return flt


def order_document(data: Mapping[str, Any], transaction_id: str | None = None) -> dict:
    """Map a create request to the stored order document.

    Accepts either the ``{orderData, paymentData}`` request envelope or a
    flat order mapping. Payment data is never persisted.

    Args:
        data: Incoming create request.
        transaction_id: Identifier returned by the payment gateway.

    Returns:
        dict: Document with ``cpf``, ``email``, ``transactionId`` and
        ``delivered`` plus any other order fields supplied by the caller.
        The cpf is stored digits-only and ``delivered`` always starts False.
    """
    order = dict(data.get("orderData") or {}) if "orderData" in data else dict(data)
    order.pop("paymentData", None)
    for f in IDENTIFIER_FIELDS:
        order.pop(f, None)
    if transaction_id is not None:
        order["transactionId"] = transaction_id
    if "cpf" in order:
        order["cpf"] = canonical_cpf(order["cpf"])
    # delivery only changes through update
    order["delivered"] = False
    return order


class OrdersMongoRepository:
    """Orders repository backed by the ``orders`` Mongo collection."""

    async def list(self) -> list[dict]:
        """Return every stored order, in natural order."""
        async with get_collection(COLLECTION) as orders:
            return [_serialize(d) async for d in orders.find({})]

    async def retrieve_by_cpf(self, cpf: str) -> Optional[dict]:
        """Return the first order matching ``cpf``, or None."""
        async with get_collection(COLLECTION) as orders:
            doc = await orders.find_one({"cpf": canonical_cpf(cpf)})
        return _serialize(doc) if doc else None

    async def create(self, data: Mapping[str, Any], transaction_id: str | None = None) -> dict:
        """Persist a new order.

        Args:
            data: Create request (see ``order_document``).
            transaction_id: Optional transaction identifier returned by
                the payments gateway.

        Returns:
            dict: The stored document including its assigned ``id``.
        """
        doc = order_document(data, transaction_id)
        async with get_collection(COLLECTION) as orders:
            result = await orders.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _serialize(doc)

    async def update(self, query: Mapping[str, Any], new_data: Mapping[str, Any]) -> Optional[dict]:
        """Set ``new_data`` fields on the first order matching ``query``.

        Identifier fields in ``new_data`` are ignored; a ``cpf`` is stored
        in its digits-only form.

        Returns:
            The updated order, or None when nothing matched.
        """
        changes = {k: v for k, v in new_data.items() if k not in IDENTIFIER_FIELDS}
        if "cpf" in changes:
            changes["cpf"] = canonical_cpf(changes["cpf"])
        async with get_collection(COLLECTION) as orders:
            if not changes:
                doc = await orders.find_one(_to_filter(query))
            else:
                doc = await orders.find_one_and_update(
                    _to_filter(query),
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER,
                )
        return _serialize(doc) if doc else None

    async def delete(self, query: Mapping[str, Any]) -> bool:
        """Delete the first order matching ``query``.

        Returns:
            bool: True if a document was removed.
        """
        async with get_collection(COLLECTION) as orders:
            result = await orders.delete_one(_to_filter(query))
        return result.deleted_count > 0

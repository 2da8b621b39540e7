"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id) -> Order:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            raise ObjectNotFoundError({"order": ["Order not found"]}) from None

    def find_by_order_number(self, order_number) -> Order | None:
        return self._dao.query.filter(order_number=order_number).all().first

    def page(self, offset, limit, sort_by="created_at", descending=True, **filters):
        """One page of orders plus the total count of matching orders.

        Returns:
            (orders, total)
        """
        query = self._dao.query
        if filters:
            query = query.filter(**filters)
        query = query.order_by(f"-{sort_by}" if descending else sort_by)
        result = query.offset(offset).limit(limit).all()
        return result.items, result.total

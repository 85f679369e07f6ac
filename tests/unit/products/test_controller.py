"""Unit tests for ProductMessageController.

Covers:
- Command routing for every products command name.
- Envelope rendering of domain errors (404, 412, 503) and payload
  validation errors (400).
- ``propagate`` hands selected exceptions back to the caller.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from modules.core.exceptions import BackendUnavailable
from modules.products.controller import MessagePatterns, ProductMessageController
from modules.products.dtos import ProductPageDTO
from modules.products.exceptions import ProductNotFound, ProductsValidationFailed

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return MagicMock()


@pytest.fixture()
def controller(service):
    return ProductMessageController(service)


class TestRouting:
    def test_every_pattern_has_a_handler(self, controller):
        assert set(controller._handlers) == set(MessagePatterns.ALL)

    def test_create(self, controller, service, make_product):
        service.create_product.return_value = make_product(name="Widget")

        reply = controller.dispatch(MessagePatterns.CREATE, {"name": "Widget", "price": 19.99})

        assert reply["ok"] is True
        assert reply["data"]["name"] == "Widget"
        dto = service.create_product.call_args.args[0]
        assert dto.price == Decimal("19.99")

    def test_find_all_accepts_missing_payload(self, controller, service, make_product):
        service.list_products.return_value = [make_product()]

        reply = controller.dispatch(MessagePatterns.FIND_ALL, None)

        assert reply["ok"] is True
        assert len(reply["data"]) == 1

    def test_find_all_paged_out_of_range(self, controller, service):
        service.list_products_paged.return_value = ProductPageDTO(data=[])

        reply = controller.dispatch(MessagePatterns.FIND_ALL_PAGED, {"page": 9, "limit": 10})

        assert reply == {"ok": True, "data": []}

    def test_find_all_paged_defaults(self, controller, service):
        service.list_products_paged.return_value = ProductPageDTO(data=[])

        controller.dispatch(MessagePatterns.FIND_ALL_PAGED, {})

        dto = service.list_products_paged.call_args.args[0]
        assert (dto.page, dto.limit) == (1, 10)

    def test_find_one(self, controller, service, make_product):
        product = make_product()
        service.get_product.return_value = product

        reply = controller.dispatch(MessagePatterns.FIND_ONE, {"id": product.id})

        assert reply["data"]["id"] == product.id
        service.get_product.assert_called_once_with(product.id)

    def test_update_uses_payload_id_as_selector(self, controller, service, make_product):
        product = make_product()
        service.update_product.return_value = product

        controller.dispatch(MessagePatterns.UPDATE, {"id": product.id, "name": "X"})

        target_id, dto = service.update_product.call_args.args
        assert target_id == product.id
        assert dto.changes() == {"name": "X"}

    def test_remove(self, controller, service, make_product):
        product = make_product(available=False)
        service.remove_product.return_value = product

        reply = controller.dispatch(MessagePatterns.REMOVE, {"id": product.id})

        assert reply["data"]["available"] is False

    def test_validate(self, controller, service, make_product):
        service.validate_products.return_value = [make_product(), make_product()]

        reply = controller.dispatch(MessagePatterns.VALIDATE, {"ids": [1, 1, 2]})

        assert len(reply["data"]) == 2
        service.validate_products.assert_called_once_with([1, 1, 2])


class TestErrorEnvelope:
    def test_not_found(self, controller, service):
        service.get_product.side_effect = ProductNotFound(5)

        reply = controller.dispatch(MessagePatterns.FIND_ONE, {"id": 5})

        assert reply == {
            "ok": False,
            "error": {
                "status": 404,
                "code": "not_found",
                "message": "Product with id #5 not found",
            },
        }

    def test_precondition_failed(self, controller, service):
        service.validate_products.side_effect = ProductsValidationFailed({999})

        reply = controller.dispatch(MessagePatterns.VALIDATE, {"ids": [1, 999]})

        assert reply["error"]["status"] == 412
        assert reply["error"]["code"] == "precondition_failed"

    def test_backend_unavailable(self, controller, service):
        service.list_products.side_effect = BackendUnavailable("Database unavailable")

        reply = controller.dispatch(MessagePatterns.FIND_ALL, {})

        assert reply["error"]["status"] == 503
        assert reply["error"]["code"] == "backend_unavailable"

    def test_validation_error_lists_fields(self, controller, service):
        reply = controller.dispatch(MessagePatterns.CREATE, {"name": "Widget"})

        assert reply["error"]["status"] == 400
        assert reply["error"]["code"] == "validation_error"
        assert any(m.startswith("price:") for m in reply["error"]["message"])
        service.create_product.assert_not_called()

    def test_unknown_field_rejected(self, controller, service):
        reply = controller.dispatch(MessagePatterns.FIND_ONE, {"id": 1, "extra": True})

        assert reply["error"]["status"] == 400
        service.get_product.assert_not_called()

    def test_non_object_payload_rejected(self, controller):
        reply = controller.dispatch(MessagePatterns.FIND_ONE, [1, 2])

        assert reply["error"]["code"] == "validation_error"

    def test_unknown_command(self, controller):
        reply = controller.dispatch("product.explode", {})

        assert reply["error"]["status"] == 404
        assert reply["error"]["code"] == "unknown_command"

    def test_non_string_command_is_unknown(self, controller):
        reply = controller.dispatch(["product.find_all"], {})

        assert reply["error"]["code"] == "unknown_command"

    @pytest.mark.parametrize(
        "payload", [{"page": 1, "limit": 10**19}, {"page": 10**19, "limit": 10}]
    )
    def test_oversized_paging_is_validation_error(self, controller, service, payload):
        reply = controller.dispatch(MessagePatterns.FIND_ALL_PAGED, payload)

        assert reply["error"]["status"] == 400
        assert reply["error"]["code"] == "validation_error"
        service.list_products_paged.assert_not_called()

    def test_oversized_name_is_validation_error(self, controller, service):
        reply = controller.dispatch(
            MessagePatterns.CREATE, {"name": "x" * 256, "price": 1}
        )

        assert reply["error"]["status"] == 400
        service.create_product.assert_not_called()


class TestPropagate:
    def test_listed_exception_is_reraised(self, controller, service):
        service.list_products.side_effect = BackendUnavailable("down")

        with pytest.raises(BackendUnavailable):
            controller.dispatch(
                MessagePatterns.FIND_ALL, {}, propagate=(BackendUnavailable,)
            )

    def test_unexpected_exception_is_not_swallowed(self, controller, service):
        service.list_products.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            controller.dispatch(MessagePatterns.FIND_ALL, {})

"""Product API views (HTTP gateway).

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into HTTP status codes:
``ProductNotFound`` -> 404, ``ProductsValidationFailed`` -> 412,
``BackendUnavailable`` -> 503, invalid payloads -> 400.
The view never swallows generic exceptions.
"""

from __future__ import annotations

from typing import Any

from drf_spectacular.utils import OpenApiParameter, extend_schema
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.exceptions import BackendUnavailable
from modules.products.controller import format_validation_errors
from modules.products.dtos import (
    MAX_PRODUCT_ID,
    CreateProductDTO,
    PaginationDTO,
    ProductOutputDTO,
    UpdateProductDTO,
    ValidateProductsDTO,
)
from modules.products.exceptions import ProductNotFound, ProductsValidationFailed
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    ErrorSerializer,
    ProductPageSerializer,
    ProductSerializer,
    UpdateProductSerializer,
    ValidateProductsSerializer,
)
from modules.products.services import ProductService


def _product_id(pk: str) -> int:
    """URL ids beyond the key range cannot name a product."""
    product_id = int(pk)
    if product_id > MAX_PRODUCT_ID:
        raise ProductNotFound(product_id)
    return product_id


def _bad_request(exc: PydanticValidationError) -> Response:
    return Response(
        {"detail": format_validation_errors(exc)},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _not_found(exc: ProductNotFound) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)


def _unavailable(exc: BackendUnavailable) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


class ProductViewSet(ViewSet):
    """ViewSet for Product operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    lookup_value_regex = r"\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    @extend_schema(
        parameters=[
            OpenApiParameter("page", int, default=1),
            OpenApiParameter("limit", int, default=10),
        ],
        responses={200: ProductPageSerializer, 400: ErrorSerializer},
    )
    def list(self, request: Request) -> Response:
        """GET /api/v1/products/?page=&limit="""
        try:
            dto = PaginationDTO.model_validate(request.query_params.dict())
        except PydanticValidationError as exc:
            return _bad_request(exc)
        try:
            page = self._service.list_products_paged(dto)
        except BackendUnavailable as exc:
            return _unavailable(exc)
        return Response(page.to_payload())

    @extend_schema(responses={200: ProductSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="all")
    def list_all(self, request: Request) -> Response:
        """GET /api/v1/products/all/"""
        try:
            products = self._service.list_products()
        except BackendUnavailable as exc:
            return _unavailable(exc)
        return Response([ProductOutputDTO.from_entity(p).to_payload() for p in products])

    @extend_schema(responses={200: ProductSerializer, 404: ErrorSerializer})
    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(_product_id(pk))
        except ProductNotFound as exc:
            return _not_found(exc)
        except BackendUnavailable as exc:
            return _unavailable(exc)
        return Response(ProductOutputDTO.from_entity(product).to_payload())

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    @extend_schema(
        request=ProductSerializer,
        responses={201: ProductSerializer, 400: ErrorSerializer},
    )
    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        try:
            dto = CreateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            product = self._service.create_product(dto)
        except BackendUnavailable as exc:
            return _unavailable(exc)

        return Response(
            ProductOutputDTO.from_entity(product).to_payload(),
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        request=UpdateProductSerializer,
        responses={200: ProductSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
    )
    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        try:
            dto = UpdateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            product = self._service.update_product(_product_id(pk), dto)
        except ProductNotFound as exc:
            return _not_found(exc)
        except BackendUnavailable as exc:
            return _unavailable(exc)

        return Response(ProductOutputDTO.from_entity(product).to_payload())

    @extend_schema(responses={200: ProductSerializer, 404: ErrorSerializer})
    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/

        Soft delete: responds with the now-unavailable product.
        """
        try:
            product = self._service.remove_product(_product_id(pk))
        except ProductNotFound as exc:
            return _not_found(exc)
        except BackendUnavailable as exc:
            return _unavailable(exc)
        return Response(ProductOutputDTO.from_entity(product).to_payload())

    # ------------------------------------------------------------------
    # Batch validation
    # ------------------------------------------------------------------

    @extend_schema(
        request=ValidateProductsSerializer,
        responses={200: ProductSerializer(many=True), 412: ErrorSerializer},
    )
    @action(detail=False, methods=["post"], url_path="validate")
    def validate(self, request: Request) -> Response:
        """POST /api/v1/products/validate/  body: {"ids": [1, 2, 3]}"""
        try:
            dto = ValidateProductsDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            products = self._service.validate_products(dto.ids)
        except ProductsValidationFailed as exc:
            body: dict[str, Any] = {"detail": str(exc), "missing_ids": exc.missing_ids}
            return Response(body, status=status.HTTP_412_PRECONDITION_FAILED)
        except BackendUnavailable as exc:
            return _unavailable(exc)

        return Response([ProductOutputDTO.from_entity(p).to_payload() for p in products])

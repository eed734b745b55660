"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.  Validation
and not-found outcomes are translated here; storage failures propagate to
``api_exception_handler`` which maps them to 503/500 without leaking the
driver's message.  ``DatabaseConnectionGuard`` rejects every operation
up front while the database is not connected.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.exceptions import NOT_FOUND, error_response, validation_error_response
from modules.core.permissions import DatabaseConnectionGuard
from modules.products.dtos import CreateProductDTO, ProductListQueryDTO, UpdateProductDTO
from modules.products.exceptions import ProductNotFound
from modules.products.repositories.mongo_repository import ProductMongoRepository
from modules.products.serializers import ProductDeletedSerializer, ProductSerializer
from modules.products.services import ProductService


def _not_found() -> Response:
    return error_response(NOT_FOUND, "Product not found.", status.HTTP_404_NOT_FOUND)


class ProductViewSet(ViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductMongoRepository`` (DIP).
    """

    permission_classes = [DatabaseConnectionGuard]
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductMongoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    @extend_schema(
        parameters=[
            OpenApiParameter("category", str, description="Exact category match."),
            OpenApiParameter(
                "search", str, description="Case-insensitive text in name or description."
            ),
        ],
        responses=ProductSerializer(many=True),
    )
    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        try:
            query = ProductListQueryDTO(
                category=request.query_params.get("category"),
                search=request.query_params.get("search"),
            )
        except PydanticValidationError as exc:
            return validation_error_response(exc)

        products = self._service.list_products(query)
        return Response(ProductSerializer(products, many=True).data)

    @extend_schema(responses=ProductSerializer)
    def retrieve(self, request: Request, pk: str) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    @extend_schema(request=ProductSerializer, responses={201: ProductSerializer})
    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        try:
            dto = CreateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return validation_error_response(exc)

        product = self._service.create_product(dto)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ProductSerializer, responses=ProductSerializer)
    def update(self, request: Request, pk: str) -> Response:
        """PUT /api/v1/products/{pk}/ (partial payloads allowed)"""
        try:
            dto = UpdateProductDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return validation_error_response(exc)

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return _not_found()
        return Response(ProductSerializer(product).data)

    @extend_schema(request=ProductSerializer, responses=ProductSerializer)
    def partial_update(self, request: Request, pk: str) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    @extend_schema(responses=ProductDeletedSerializer)
    def destroy(self, request: Request, pk: str) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response({"message": "Product deleted successfully."})

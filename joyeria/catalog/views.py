import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser, IsAuthenticated

from joyeria.core.exceptions import NotFoundError, ValidationError
from joyeria.core.permissions import IsRecentlyActive, IsStaffOrReadOnly
from joyeria.core.utils import api_response

from .models import Category, Product
from .serializers import CategorySerializer, CategoryStatusSerializer, ProductSerializer

logger = logging.getLogger(__name__)

PRODUCT_REQUIRED = 'Datos incompletos. Se requiere nombre, precio y una categoría.'


def _get_or_404(model, pk, message):
    obj = model.objects.filter(pk=pk).first()
    if obj is None:
        raise NotFoundError(message)
    return obj


@api_view(['GET', 'POST'])
@permission_classes([IsStaffOrReadOnly, IsRecentlyActive])
def category_list_create(request):
    """List all categories or create a new one (staff)"""
    if request.method == 'GET':
        categories = Category.objects.all().order_by('nombre')
        return api_response(data=CategorySerializer(categories, many=True).data)

    serializer = CategorySerializer(data=request.data)
    if not serializer.is_valid():
        codes = serializer.errors.get('nombre', [])
        if any(getattr(error, 'code', None) == 'unique' for error in codes):
            raise ValidationError('Categoría duplicada')
        raise ValidationError('Nombre requerido', errors=serializer.errors)
    category = serializer.save()
    logger.info(f"Category {category.pk} created by user {request.user.pk}")
    return api_response(
        data=CategorySerializer(category).data,
        message='Categoría creada',
        status=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminUser, IsRecentlyActive])
def category_status(request, pk):
    """Activate or deactivate a category"""
    category = _get_or_404(Category, pk, 'Categoría no encontrada')
    serializer = CategoryStatusSerializer(data=request.data)
    if not serializer.is_valid():
        raise ValidationError('El estado activo es requerido', errors=serializer.errors)
    category.activo = serializer.validated_data['activo']
    category.save(update_fields=['activo', 'updated_at'])
    return api_response(message='Estado de categoría actualizado')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser, IsRecentlyActive])
def category_delete(request, pk):
    """Delete a category together with its products"""
    category = _get_or_404(Category, pk, 'Categoría no encontrada')
    category.delete()
    logger.info(f"Category {pk} deleted by user {request.user.pk}")
    return api_response(message='Categoría eliminada con éxito')


@api_view(['GET', 'POST'])
@permission_classes([IsStaffOrReadOnly, IsRecentlyActive])
def product_list_create(request):
    """Active products, newest first, or create a product (staff)"""
    if request.method == 'GET':
        products = Product.objects.select_related('categoria').filter(activo=True).order_by('-id')
        return api_response(data=ProductSerializer(products, many=True).data)

    serializer = ProductSerializer(data=request.data)
    if not serializer.is_valid():
        raise ValidationError(PRODUCT_REQUIRED, errors=serializer.errors)
    product = serializer.save()
    logger.info(f"Product {product.pk} created by user {request.user.pk}")
    return api_response(
        data=ProductSerializer(product).data,
        message='Producto creado',
        status=status.HTTP_201_CREATED,
    )


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser, IsRecentlyActive])
def product_delete(request, pk):
    """Soft delete: the product stays in the table but leaves the catalog"""
    product = _get_or_404(Product, pk, 'Producto no encontrado')
    product.activo = False
    product.save(update_fields=['activo', 'updated_at'])
    return api_response(message='Producto eliminado')

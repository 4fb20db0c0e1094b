"""
Tests for the catalog app
Tests: public product and category listings, staff-only catalog maintenance
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from joyeria.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from joyeria.catalog.models import Category, Product

BASE = '/api/v1/products'


class ProductListTests(TestCase):
    """Test the public product listing"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.anillos = TestDataFactory.create_category(nombre='Anillos')
        self.collares = TestDataFactory.create_category(nombre='Collares', activo=False)

    def test_lists_active_products_newest_first(self):
        first = TestDataFactory.create_product(self.anillos, nombre='Anillo de oro')
        second = TestDataFactory.create_product(self.anillos, nombre='Anillo de plata')
        TestDataFactory.create_product(self.anillos, nombre='Anillo retirado', activo=False)

        response = self.client.get(f'{BASE}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual([p['id'] for p in response.data['data']], [second.pk, first.pk])

    def test_inactive_category_name_is_hidden(self):
        TestDataFactory.create_product(self.collares, nombre='Collar de perlas')
        TestDataFactory.create_product(self.anillos, nombre='Anillo de oro')
        TestDataFactory.create_product(None, nombre='Broche sin categoría')

        response = self.client.get(f'{BASE}/')

        names = {p['nombre']: p['categoria_nombre'] for p in response.data['data']}
        self.assertEqual(names, {
            'Anillo de oro': 'Anillos',
            'Collar de perlas': None,
            'Broche sin categoría': None,
        })

    def test_listing_is_public(self):
        TestDataFactory.create_product(self.anillos)
        response = self.client.get(BASE)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['precio'], '1500.00')

    def test_categories_sorted_by_name(self):
        TestDataFactory.create_category(nombre='Aretes')

        response = self.client.get(f'{BASE}/categorias/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [(c['nombre'], c['activo']) for c in response.data['data']],
            [('Anillos', True), ('Aretes', True), ('Collares', False)],
        )


class CatalogMaintenanceTests(TestCase):
    """Test staff-only catalog writes"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.staff = TestDataFactory.create_user(is_staff=True)
        self.category = TestDataFactory.create_category(nombre='Anillos')

    def test_customers_cannot_write(self):
        self.client.authenticate_user(TestDataFactory.create_user())

        response = self.client.post(f'{BASE}/categorias/', {'nombre': 'Pulseras'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.logout()
        response = self.client.post(f'{BASE}/', {'nombre': 'Anillo'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_category(self):
        self.client.authenticate_user(self.staff)

        response = self.client.post(
            f'{BASE}/categorias/', {'nombre': 'Pulseras', 'descripcion': 'Oro y plata'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Categoría creada')
        self.assertTrue(Category.objects.get(nombre='Pulseras').activo)

    def test_category_validation(self):
        self.client.authenticate_user(self.staff)

        response = self.client.post(f'{BASE}/categorias/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Nombre requerido')

        response = self.client.post(f'{BASE}/categorias/', {'nombre': 'Anillos'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Categoría duplicada')

    def test_toggle_category_status(self):
        self.client.authenticate_user(self.staff)

        response = self.client.post(
            f'{BASE}/categorias/{self.category.pk}/status/', {'activo': False}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.category.refresh_from_db()
        self.assertFalse(self.category.activo)

        response = self.client.post(f'{BASE}/categorias/999/status/', {'activo': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Categoría no encontrada')

    def test_delete_category_removes_its_products(self):
        TestDataFactory.create_product(self.category)
        self.client.authenticate_user(self.staff)

        response = self.client.delete(f'{BASE}/categorias/{self.category.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Category.objects.exists())
        self.assertFalse(Product.objects.exists())

    def test_create_product(self):
        self.client.authenticate_user(self.staff)

        response = self.client.post(f'{BASE}/', {
            'nombre': 'Anillo de compromiso',
            'precio': '8999.90',
            'categoria_id': self.category.pk,
            'stock': 2,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['categoria_nombre'], 'Anillos')
        product = Product.objects.get()
        self.assertEqual(product.precio, Decimal('8999.90'))
        self.assertTrue(product.activo)

    def test_product_requires_name_price_and_category(self):
        self.client.authenticate_user(self.staff)

        response = self.client.post(f'{BASE}/', {'nombre': 'Anillo', 'precio': '10.00'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data['message'], 'Datos incompletos. Se requiere nombre, precio y una categoría.')
        self.assertFalse(Product.objects.exists())

    def test_delete_product_is_soft(self):
        product = TestDataFactory.create_product(self.category)
        self.client.authenticate_user(self.staff)

        response = self.client.delete(f'{BASE}/{product.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertFalse(product.activo)
        self.assertEqual(self.client.get(f'{BASE}/').data['data'], [])

"""
Tests for the storefront screens and content endpoints
"""
from django.test import TestCase
from rest_framework import status
from joyeria.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from joyeria.storefront.content import ABOUT_US, ADMIN_REPORTS, LOCATION


class ScreenTests(TestCase):
    """Test the HTML screens"""

    def test_about_us(self):
        response = self.client.get('/nosotros/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTemplateUsed(response, 'storefront/layout.html')
        self.assertContains(response, ABOUT_US['title'])
        self.assertContains(response, 'layout-background')

    def test_location_embeds_map(self):
        response = self.client.get('/ubicacion/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertContains(response, '<iframe')
        self.assertContains(response, LOCATION['address'])

    def test_admin_reports_requires_staff(self):
        response = self.client.get('/admin/reportes/')
        self.assertEqual(response.status_code, status.HTTP_302_FOUND)

        user = TestDataFactory.create_user()
        self.client.force_login(user)
        response = self.client.get('/admin/reportes/')
        self.assertEqual(response.status_code, status.HTTP_302_FOUND)

    def test_admin_reports_lists_every_report(self):
        self.client.force_login(TestDataFactory.create_user(is_staff=True))
        response = self.client.get('/admin/reportes/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        for report in ADMIN_REPORTS:
            self.assertContains(response, report['title'])
            self.assertContains(response, report['icon'])

    def test_report_links_open_the_html_screen(self):
        self.client.force_login(TestDataFactory.create_user(is_staff=True))
        response = self.client.get('/admin/reportes/')
        self.assertContains(response, 'href="/admin/reportes/2/"')
        self.assertNotContains(response, '/api/v1/reports/')

    def test_admin_report_detail_screen(self):
        self.client.force_login(TestDataFactory.create_user(is_staff=True))

        response = self.client.get('/admin/reportes/2/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTemplateUsed(response, 'storefront/report_detail.html')
        self.assertContains(response, 'Productos Más Vendidos')

        response = self.client.get('/admin/reportes/99/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_report_detail_requires_staff(self):
        response = self.client.get('/admin/reportes/1/')
        self.assertEqual(response.status_code, status.HTTP_302_FOUND)


class ContentAPITests(TestCase):
    """Test the JSON content and report endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_about_is_public(self):
        response = self.client.get('/api/v1/content/about/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], ABOUT_US)

    def test_location_is_public(self):
        response = self.client.get('/api/v1/content/location/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['map_embed_url'], LOCATION['map_embed_url'])

    def test_reports_for_staff(self):
        self.client.authenticate_user(TestDataFactory.create_user(is_staff=True))

        response = self.client.get('/api/v1/reports/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['id'] for r in response.data['data']], [1, 2, 3])

    def test_reports_forbidden_for_customers(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get('/api/v1/reports/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data['success'])

    def test_report_detail(self):
        self.client.authenticate_user(TestDataFactory.create_user(is_staff=True))

        response = self.client.get('/api/v1/reports/2/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['title'], 'Productos Más Vendidos')

        response = self.client.get('/api/v1/reports/99/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Reporte no encontrado')

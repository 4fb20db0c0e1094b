from django.contrib.admin.views.decorators import staff_member_required
from django.http import Http404
from django.shortcuts import render
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated

from joyeria.core.exceptions import NotFoundError
from joyeria.core.permissions import IsRecentlyActive
from joyeria.core.utils import api_response

from .content import ABOUT_US, ADMIN_REPORTS, LOCATION, get_report


# HTML screens

def about_us(request):
    return render(request, 'storefront/about.html', {'about': ABOUT_US})


def location(request):
    return render(request, 'storefront/location.html', {'location': LOCATION})


@staff_member_required
def admin_reports(request):
    return render(request, 'storefront/admin_reports.html', {'reports': ADMIN_REPORTS})


@staff_member_required
def admin_report_detail(request, pk):
    report = get_report(pk)
    if report is None:
        raise Http404('Reporte no encontrado')
    return render(request, 'storefront/report_detail.html', {'report': report})


# JSON endpoints for the frontend

@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def about_us_content(request):
    return api_response(data=ABOUT_US)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def location_content(request):
    return api_response(data=LOCATION)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser, IsRecentlyActive])
def report_list(request):
    """Reports available on the admin dashboard"""
    return api_response(data=ADMIN_REPORTS)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser, IsRecentlyActive])
def report_detail(request, pk):
    report = get_report(pk)
    if report is None:
        raise NotFoundError('Reporte no encontrado')
    return api_response(data=report)

from django.urls import path
from .views import (
    brand_list, brand_by_code, brand_detail, brand_compliance, brand_logo_list, brand_logo_upload,
    brand_logo_delete, platform_credentials, platform_credentials_test,
)

urlpatterns = [
    path('brands/', brand_list, name='brand-list'),
    path('brands/by-code/<str:code>/', brand_by_code, name='brand-by-code'),
    path('brands/<str:pk>/', brand_detail, name='brand-detail'),
    path('brands/<str:pk>/compliance/', brand_compliance, name='brand-compliance'),
    path('brand-logos/', brand_logo_list, name='brand-logo-list'),
    path('brand-logos/<str:pk>/', brand_logo_delete, name='brand-logo-delete'),
    path('brand-logos/<str:pk>/upload/', brand_logo_upload, name='brand-logo-upload'),
    path('platform-credentials/', platform_credentials, name='platform-credentials'),
    path('platform-credentials/test/', platform_credentials_test, name='platform-credentials-test'),
]

"""
URL configuration for the back-office gateway.

Every app mounts its routes under api/v1/.
"""
from django.urls import path, include

urlpatterns = [
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.clients.urls')),
    path('api/v1/', include('backend.artists.urls')),
    path('api/v1/', include('backend.schools.urls')),
    path('api/v1/', include('backend.galleries.urls')),
    path('api/v1/', include('backend.items.urls')),
    path('api/v1/', include('backend.auctions.urls')),
    path('api/v1/', include('backend.consignments.urls')),
    path('api/v1/', include('backend.invoices.urls')),
    path('api/v1/', include('backend.banking.urls')),
    path('api/v1/', include('backend.refunds.urls')),
    path('api/v1/', include('backend.reimbursements.urls')),
    path('api/v1/', include('backend.logistics.urls')),
    path('api/v1/', include('backend.payments.urls')),
    path('api/v1/', include('backend.brands.urls')),
]

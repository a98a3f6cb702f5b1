from django.urls import path
from .views import (
    invoice_list, invoice_detail, invoice_generate, invoice_pdf, invoice_public_url,
    invoice_shipping_payment_link, invoice_payment_status, invoice_quote,
)

urlpatterns = [
    path('invoices/', invoice_list, name='invoice-list'),
    path('invoices/generate/', invoice_generate, name='invoice-generate'),
    path('invoices/quote/', invoice_quote, name='invoice-quote'),
    path('invoices/<str:pk>/', invoice_detail, name='invoice-detail'),
    path('invoices/<str:pk>/pdf/', invoice_pdf, name='invoice-pdf'),
    path('invoices/<str:pk>/public-url/', invoice_public_url, name='invoice-public-url'),
    path('invoices/<str:pk>/shipping-payment-link/', invoice_shipping_payment_link, name='invoice-shipping-payment-link'),
    path('invoices/<str:pk>/payment-status/', invoice_payment_status, name='invoice-payment-status'),
]

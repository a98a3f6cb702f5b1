from django.urls import path
from .views import (
    stripe_credentials, stripe_save_credentials, stripe_test_connection, stripe_create_payment_link,
    stripe_payment_status, xero_auth_url, xero_credentials, xero_save_credentials, xero_create_payment_link,
    xero_invoice_status, xero_refresh_token, invoice_payment_link,
)

urlpatterns = [
    path('payments/stripe/credentials/', stripe_save_credentials, name='stripe-save-credentials'),
    path('payments/stripe/credentials/<str:brand_id>/', stripe_credentials, name='stripe-credentials'),
    path('payments/stripe/test-connection/<str:brand_id>/', stripe_test_connection, name='stripe-test-connection'),
    path('payments/stripe/payment-links/', stripe_create_payment_link, name='stripe-payment-link'),
    path('payments/stripe/payment-status/<str:brand_id>/<str:payment_id>/', stripe_payment_status,
         name='stripe-payment-status'),
    path('payments/xero/auth-url/<str:brand_id>/', xero_auth_url, name='xero-auth-url'),
    path('payments/xero/credentials/', xero_save_credentials, name='xero-save-credentials'),
    path('payments/xero/credentials/<str:brand_id>/', xero_credentials, name='xero-credentials'),
    path('payments/xero/payment-links/', xero_create_payment_link, name='xero-payment-link'),
    path('payments/xero/invoice-status/<str:brand_id>/<str:invoice_id>/', xero_invoice_status,
         name='xero-invoice-status'),
    path('payments/xero/refresh-token/<str:brand_id>/', xero_refresh_token, name='xero-refresh-token'),
    path('payments/invoice-payment-link/', invoice_payment_link, name='invoice-payment-link'),
]

from django.urls import path
from .views import (
    banking_list_create, banking_detail, banking_reconcile, banking_stats, banking_accounts,
)

urlpatterns = [
    path('banking/', banking_list_create, name='banking-list-create'),
    path('banking/stats/', banking_stats, name='banking-stats'),
    path('banking/accounts/', banking_accounts, name='banking-accounts'),
    path('banking/<str:pk>/', banking_detail, name='banking-detail'),
    path('banking/<str:pk>/reconcile/', banking_reconcile, name='banking-reconcile'),
]

from django.urls import path
from .views import refund_list_create, refund_detail, refund_approve, refund_process, refund_stats

urlpatterns = [
    path('refunds/', refund_list_create, name='refund-list-create'),
    path('refunds/stats/', refund_stats, name='refund-stats'),
    path('refunds/<str:pk>/', refund_detail, name='refund-detail'),
    path('refunds/<str:pk>/approve/', refund_approve, name='refund-approve'),
    path('refunds/<str:pk>/process/', refund_process, name='refund-process'),
]

from django.urls import path
from .views import login, logout, user_me, health_check, choices

urlpatterns = [
    # Auth endpoints
    path('auth/login/', login, name='login'),
    path('auth/logout/', logout, name='logout'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/verify/', user_me, name='auth-verify'),

    path('health/', health_check, name='health-check'),
    path('choices/', choices, name='choices'),
]

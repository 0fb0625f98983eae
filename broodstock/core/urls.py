from django.urls import path
from .views import login, logout, current_user

urlpatterns = [
    # Demo auth endpoints
    path('auth/login/', login, name='auth-login'),
    path('auth/logout/', logout, name='auth-logout'),
    path('auth/me/', current_user, name='auth-me'),
]

"""
URL configuration for the Zé da Safra project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.0/topics/http/urls/
"""
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView

from zedasafra.views import health_view

admin.site.site_header = "Administração Zé da Safra"
admin.site.site_title = "Administração Zé da Safra"
admin.site.index_title = "Painel de administração"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', RedirectView.as_view(pattern_name='custos:dashboard', permanent=False)),
    path('health/', health_view, name='health'),
    path('conta/', include('users.urls', namespace='users')),
    path('custos/', include('custos.urls', namespace='custos')),
]

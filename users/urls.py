from django.urls import path

from .views import ProducerLoginView, ProducerLogoutView

app_name = "users"

urlpatterns = [
    path("entrar/", ProducerLoginView.as_view(), name="login"),
    path("sair/", ProducerLogoutView.as_view(), name="logout"),
]

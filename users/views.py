from __future__ import annotations

from django.contrib.auth import logout
from django.contrib.auth.views import LoginView
from django.shortcuts import redirect
from django.urls import reverse
from django.views import generic


class ProducerLoginView(LoginView):
    """Entrada do produtor; após autenticar segue para o painel de custos."""

    template_name = "users/login.html"
    redirect_authenticated_user = True

    def get_default_redirect_url(self) -> str:
        return reverse("custos:dashboard")


class ProducerLogoutView(generic.View):
    """Encerra a sessão a partir do link "Sair" do menu (GET) ou de um formulário (POST)."""

    http_method_names = ["get", "post"]

    def dispatch(self, request, *args, **kwargs):
        logout(request)
        return redirect("users:login")

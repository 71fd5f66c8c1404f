from __future__ import annotations

from django.contrib import admin, messages

from .models import ProducerAccount


@admin.action(description="Ativar contas selecionadas")
def ativar_contas(modeladmin, request, queryset):
    atualizadas = queryset.update(is_active=True)
    messages.success(request, f"{atualizadas} contas ativadas.")


@admin.action(description="Desativar contas selecionadas")
def desativar_contas(modeladmin, request, queryset):
    atualizadas = queryset.update(is_active=False)
    messages.success(request, f"{atualizadas} contas desativadas.")


@admin.register(ProducerAccount)
class ProducerAccountAdmin(admin.ModelAdmin):
    list_display = ("display_name", "user", "backend_user_id", "default_farm", "is_active")
    list_filter = ("is_active",)
    search_fields = ("display_name", "backend_user_id", "user__username", "user__email")
    autocomplete_fields = ("user",)
    actions = [ativar_contas, desativar_contas]

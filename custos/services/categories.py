from __future__ import annotations

import unicodedata

from django.db import models


class CategoryGroup(models.TextChoices):
    """Macrogrupos used to bucket plot expenses.

    ``ALL`` is only meaningful as a filter value; the remaining members are
    the cost buckets every ``PlotCost`` row carries.
    """

    ALL = "todos", "Todos"
    INPUTS = "insumos", "Insumos"
    OPERATIONAL = "operacional", "Operacional"
    SERVICES_LOGISTICS = "servicos_logistica", "Serviços/Logística"
    ADMINISTRATIVE = "administrativos", "Administrativos"
    OTHER = "outros", "Outros"

    @property
    def record_key(self) -> str:
        return self.value

    @property
    def tooltip(self) -> str:
        return CATEGORY_TOOLTIPS.get(self, "")

    @classmethod
    def parse(cls, raw: object) -> "CategoryGroup | None":
        """Resolve a value or label (case and accent insensitive)."""
        if isinstance(raw, cls):
            return raw
        if raw is None:
            return None
        needle = _normalize(str(raw))
        if not needle:
            return None
        for member in cls:
            if needle in (_normalize(member.value), _normalize(member.label), _normalize(member.name)):
                return member
        return None


class SourceSystem(models.TextChoices):
    FINANCIAL = "financeiro", "Financeiro"
    AGRICULTURAL_ACTIVITY = "atividade_agricola", "Atividade Agrícola"
    INVENTORY = "estoque", "Estoque"

    @classmethod
    def parse(cls, raw: object) -> "SourceSystem":
        needle = _normalize(str(raw or ""))
        for member in cls:
            if needle in (_normalize(member.value), _normalize(member.label), _normalize(member.name)):
                return member
        raise ValueError(f"Origem de custo desconhecida: {raw!r}")


COST_BUCKETS: tuple[CategoryGroup, ...] = (
    CategoryGroup.INPUTS,
    CategoryGroup.OPERATIONAL,
    CategoryGroup.SERVICES_LOGISTICS,
    CategoryGroup.ADMINISTRATIVE,
    CategoryGroup.OTHER,
)

CATEGORY_TOOLTIPS = {
    CategoryGroup.INPUTS: "Fertilizantes, defensivos, sementes",
    CategoryGroup.OPERATIONAL: "Combustível, manutenção, reparos",
    CategoryGroup.SERVICES_LOGISTICS: "Transporte, armazenagem, serviços terceirizados",
    CategoryGroup.ADMINISTRATIVE: "Despesas fixas, seguros, impostos",
    CategoryGroup.OTHER: "Despesas diversas",
}

# Checked in order; the first bucket with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[CategoryGroup, tuple[str, ...]], ...] = (
    (
        CategoryGroup.INPUTS,
        ("fertilizante", "adubo", "defensivo", "herbicida", "fungicida", "inseticida", "semente", "muda", "corretivo", "calcario", "insumo"),
    ),
    (
        CategoryGroup.SERVICES_LOGISTICS,
        ("transporte", "frete", "armazenagem", "beneficiamento", "servico", "logistica", "aluguel de maquina"),
    ),
    (
        CategoryGroup.OPERATIONAL,
        ("combustivel", "diesel", "manutencao", "reparo", "peca", "mao de obra", "diarista", "operacional", "maquina"),
    ),
    (
        CategoryGroup.ADMINISTRATIVE,
        ("administrativ", "seguro", "imposto", "taxa", "despesas fixas", "contabil", "arrendamento", "encargo"),
    ),
)


def _normalize(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value.strip().lower())
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def classify_category(category: str | None) -> CategoryGroup:
    """Infer the macrogrupo of a free-text ledger category."""
    needle = _normalize(category or "")
    if not needle:
        return CategoryGroup.OTHER
    for group, keywords in CATEGORY_KEYWORDS:
        if any(keyword in needle for keyword in keywords):
            return group
    return CategoryGroup.OTHER

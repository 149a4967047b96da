"""Predefined payroll codes and job models offered as starting points."""

from dataclasses import dataclass
from typing import Literal

Category = Literal["PROVENTOS", "DESCONTOS", "OUTROS"]


@dataclass(frozen=True)
class PayrollCode:
    code: str
    description: str
    category: Category


@dataclass(frozen=True)
class PayrollModel:
    """A job position and the codes usually present on its payslips."""

    name: str
    description: str
    codes: tuple[str, ...]


PREDEFINED_CODES: tuple[PayrollCode, ...] = (
    PayrollCode("001", "Salário Base", "PROVENTOS"),
    PayrollCode("002", "Adicional por Tempo de Serviço", "PROVENTOS"),
    PayrollCode("003", "Gratificação de Função", "PROVENTOS"),
    PayrollCode("004", "Hora Extra 50%", "PROVENTOS"),
    PayrollCode("005", "Hora Extra 100%", "PROVENTOS"),
    PayrollCode("006", "Adicional Noturno", "PROVENTOS"),
    PayrollCode("007", "Adicional de Insalubridade", "PROVENTOS"),
    PayrollCode("008", "Adicional de Periculosidade", "PROVENTOS"),
    PayrollCode("009", "13º Salário", "PROVENTOS"),
    PayrollCode("010", "Férias", "PROVENTOS"),
    PayrollCode("501", "INSS", "DESCONTOS"),
    PayrollCode("502", "IRRF", "DESCONTOS"),
    PayrollCode("503", "Vale Transporte", "DESCONTOS"),
    PayrollCode("504", "Vale Alimentação", "DESCONTOS"),
    PayrollCode("505", "Plano de Saúde", "DESCONTOS"),
    PayrollCode("506", "Contribuição Sindical", "DESCONTOS"),
    PayrollCode("507", "Faltas", "DESCONTOS"),
    PayrollCode("508", "Adiantamento Salarial", "DESCONTOS"),
    PayrollCode("901", "Base INSS", "OUTROS"),
    PayrollCode("902", "Base FGTS", "OUTROS"),
    PayrollCode("903", "Base IRRF", "OUTROS"),
)

PREDEFINED_MODELS: tuple[PayrollModel, ...] = (
    PayrollModel(
        "Analista Administrativo",
        "Cargo de analista com foco em atividades administrativas",
        ("001", "002", "501", "502", "503", "504"),
    ),
    PayrollModel(
        "Operador de Produção",
        "Cargo operacional com adicionais de periculosidade",
        ("001", "006", "008", "501", "502", "503", "504"),
    ),
    PayrollModel(
        "Supervisor",
        "Cargo de supervisão com gratificação de função",
        ("001", "002", "003", "501", "502", "504", "505"),
    ),
    PayrollModel(
        "Vendedor",
        "Cargo comercial com comissões",
        ("001", "501", "502", "503", "504"),
    ),
)


def get_code(code: str) -> PayrollCode | None:
    return next((c for c in PREDEFINED_CODES if c.code == code), None)


def get_model(name: str) -> PayrollModel | None:
    wanted = name.strip().lower()
    return next((m for m in PREDEFINED_MODELS if m.name.lower() == wanted), None)


def codes_by_category(category: Category) -> list[PayrollCode]:
    return [c for c in PREDEFINED_CODES if c.category == category]


def describe_code(code: str) -> str:
    """Description of a predefined code, or the code itself."""
    payroll_code = get_code(code)
    return payroll_code.description if payroll_code else code

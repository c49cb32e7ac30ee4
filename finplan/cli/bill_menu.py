from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from finplan.constants import KIND_LABELS, format_month
from finplan.models import format_brl, parse_brl
from finplan.models.bill import Bill, BillKind
from finplan.models.summary import BillsSummary
from finplan.models.user import User
from finplan.services.bill_service import BillService
from finplan.services.bills_summary import BillsSummaryService

console = Console()


def bill_menu(user: User, bill_service: BillService, summary_service: BillsSummaryService) -> None:
    while True:
        choice = questionary.select(
            f"Contas de {user.name}",
            choices=[
                "Listar Contas",
                "Nova Conta",
                "Resumo do Mês",
                "Voltar",
            ],
        ).ask()

        if choice is None or choice == "Voltar":
            break
        elif choice == "Listar Contas":
            _list_bills(user, bill_service)
        elif choice == "Nova Conta":
            _create_bill(user, bill_service)
        elif choice == "Resumo do Mês":
            _show_summary(user, summary_service)


def _installments_label(bill: Bill) -> str:
    if bill.kind == BillKind.INSTALLMENT:
        return f"{bill.installments_number}x {format_brl(bill.monthly_share)}"
    return "-"


def _list_bills(user: User, bill_service: BillService) -> None:
    bills = bill_service.list_bills(user.id)
    if not bills:
        console.print("[yellow]Nenhuma conta cadastrada.[/yellow]")
        return

    table = Table(title="Contas")
    table.add_column("Nome", style="bold")
    table.add_column("Tipo", justify="center")
    table.add_column("Valor", justify="right")
    table.add_column("Parcelas", justify="right")
    table.add_column("Criada em")

    for bill in bills:
        created = bill.created_at.strftime("%d/%m/%Y") if bill.created_at else "-"
        table.add_row(
            bill.label,
            KIND_LABELS[bill.kind],
            format_brl(bill.value),
            _installments_label(bill),
            created,
        )

    console.print()
    console.print(table)
    console.print()


def _create_bill(user: User, bill_service: BillService) -> None:
    console.print()
    console.print("[bold]Nova Conta[/bold]", style="cyan")

    name = questionary.text("Nome:").ask()
    if not name:
        console.print("[yellow]Operação cancelada.[/yellow]")
        return

    while True:
        val = questionary.text("Valor total (ex: 150.00):").ask()
        value = parse_brl(val or "")
        if value is not None and value >= 0:
            break
        console.print("[red]Valor inválido. Tente novamente.[/red]")

    description = questionary.text("Descrição (opcional):").ask() or None

    kind = questionary.select(
        "Tipo:",
        choices=[
            questionary.Choice("Fixa (todo mês)", value=BillKind.FIXED),
            questionary.Choice("Avulsa (só este mês)", value=BillKind.MONTHLY_MISC),
            questionary.Choice("Parcelada", value=BillKind.INSTALLMENT),
        ],
    ).ask()
    if kind is None:
        console.print("[yellow]Operação cancelada.[/yellow]")
        return

    installments: int | None = None
    if kind == BillKind.MONTHLY_MISC:
        installments = 1
    elif kind == BillKind.INSTALLMENT:
        while True:
            raw = questionary.text("Número de parcelas (2 ou mais):").ask() or ""
            if raw.strip().isdigit() and int(raw) >= 2:
                installments = int(raw)
                break
            console.print("[red]Número de parcelas inválido.[/red]")

    try:
        bill = bill_service.create_bill(
            user_id=user.id,
            name=name,
            value=value,
            description=description,
            installments_number=installments,
        )
    except ValueError as e:
        console.print(f"[red]Erro ao criar conta: {e}[/red]")
        return

    console.print(f"[green bold]Conta '{bill.name}' criada com sucesso![/green bold]")


def _show_summary(user: User, summary_service: BillsSummaryService) -> None:
    summary: BillsSummary = summary_service.compute_summary(user.id)
    now = summary_service.clock()

    table = Table(title=f"Resumo de {format_month(now.year, now.month)}")
    table.add_column("Item")
    table.add_column("Valor", justify="right")

    table.add_row("Contas ativas", str(summary.bills_active_count))
    table.add_row("Fixas", format_brl(summary.total_fixed_bills_value))
    table.add_row("Avulsas do mês", format_brl(summary.total_monthly_misc_bills_value))
    table.add_row("Parceladas (valor cheio)", format_brl(summary.total_installment_value))
    table.add_row("[bold]Total do mês[/bold]", f"[bold]{format_brl(summary.total_value)}[/bold]")
    table.add_row("Próximo mês", format_brl(summary.partial_value_next_month))
    table.add_row("Daqui a 2 meses", format_brl(summary.partial_value_2_months_later))
    table.add_row("Daqui a 3+ meses", format_brl(summary.partial_value_3_months_later))
    table.add_row("Total projetado", format_brl(summary.total_bill_amount))

    console.print()
    console.print(table)
    if summary.fixes_bills_names:
        console.print(f"  [dim]Fixas:[/dim] {summary.fixes_bills_names}")
    if summary.monthly_misc_bills_names:
        console.print(f"  [dim]Avulsas:[/dim] {summary.monthly_misc_bills_names}")
    if summary.installment_bills_names:
        console.print(f"  [dim]Parceladas:[/dim] {summary.installment_bills_names}")
    console.print()

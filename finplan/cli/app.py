import questionary
from rich.console import Console

from finplan.cli.bill_menu import bill_menu
from finplan.models.user import User
from finplan.repositories.factory import (
    get_bill_repository,
    get_planning_repository,
    get_user_repository,
)
from finplan.services.bill_service import BillService
from finplan.services.bills_summary import BillsSummaryService
from finplan.services.user_service import UserService

console = Console()


def _build_services() -> tuple[UserService, BillService, BillsSummaryService]:
    bill_repo = get_bill_repository()
    summary_service = BillsSummaryService(bill_repo)
    return (
        UserService(get_user_repository(), get_planning_repository(), summary_service),
        BillService(bill_repo),
        summary_service,
    )


def _select_user(user_service: UserService) -> User | None:
    users = user_service.list_users()
    if not users:
        console.print("[yellow]Nenhum usuário cadastrado.[/yellow]")
        return None
    choices = [questionary.Choice(f"{u.name} <{u.email}>", value=u) for u in users]
    choices.append(questionary.Choice("Voltar", value=None))
    return questionary.select("Selecione o usuário:", choices=choices).ask()


def main_menu() -> None:
    user_service, bill_service, summary_service = _build_services()

    console.print()
    console.print("[bold]Planejamento Financeiro[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Menu Principal",
            choices=[
                "Contas de um Usuário",
                "Sair",
            ],
        ).ask()

        if choice is None or choice == "Sair":
            console.print("[bold]Até logo![/bold]")
            break
        elif choice == "Contas de um Usuário":
            user = _select_user(user_service)
            if user is not None:
                bill_menu(user, bill_service, summary_service)

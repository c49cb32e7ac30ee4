"""Seed the database with demo data for local development.

Usage:
    python -m finplan.scripts.seed
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from decimal import Decimal

from faker import Faker
from rich.console import Console
from rich.table import Table
from sqlalchemy import text

from finplan.constants import APP_TZ
from finplan.db import get_connection, initialize_db
from finplan.models import format_brl
from finplan.models.user import User
from finplan.repositories.factory import (
    get_bill_repository,
    get_planning_repository,
    get_user_repository,
)
from finplan.services.bill_service import BillService
from finplan.services.planning_service import PlanningService
from finplan.services.user_service import UserService

console = Console()
fake = Faker("pt_BR")

MAIN_EMAIL = "admin@example.com"
PASSWORD = "password"
NUM_EXTRA_USERS = 4

TABLES_TO_CLEAR = ["plannings", "bills", "users"]

# (name, description, value)
FIXED_TEMPLATES = [
    ("Aluguel", "Apartamento centro", Decimal("1800.00")),
    ("Internet", None, Decimal("119.90")),
    ("Academia", "Plano mensal", Decimal("99.90")),
    ("Streaming", None, Decimal("39.90")),
    ("Plano de saúde", "Coparticipação", Decimal("450.00")),
]

MISC_TEMPLATES = [
    ("Farmácia", None, Decimal("87.35")),
    ("Presente de aniversário", "Para a mãe", Decimal("150.00")),
    ("Conserto do carro", "Troca de pastilhas", Decimal("420.00")),
]

# (name, description, total value, installments)
INSTALLMENT_TEMPLATES = [
    ("Notebook", "12x sem juros", Decimal("4800.00"), 12),
    ("Geladeira", None, Decimal("3200.00"), 10),
    ("Curso de inglês", "Anual", Decimal("1500.00"), 6),
    ("Celular", None, Decimal("2400.00"), 4),
]


def _clear_all(conn) -> None:
    console.print("\n[yellow]Clearing all tables...[/yellow]")
    for table in TABLES_TO_CLEAR:
        conn.execute(text(f"DELETE FROM {table}"))  # noqa: S608
        console.print(f"  Cleared [dim]{table}[/dim]")
    conn.commit()
    console.print("[green]All tables cleared.[/green]\n")


def _create_users(user_service: UserService) -> list[User]:
    """Create the main user + extra users with random salaries."""
    console.print("[cyan]Creating users...[/cyan]")

    main_user = user_service.register_user(
        name="Administrador",
        email=MAIN_EMAIL,
        password=PASSWORD,
        salary=Decimal("8500.00"),
    )
    console.print(f"  [bold green]Main user:[/bold green] {main_user.email} (id={main_user.id})")

    users = [main_user]
    emails_seen = {MAIN_EMAIL}
    for _ in range(NUM_EXTRA_USERS):
        email = fake.email()
        while email in emails_seen:
            email = fake.email()
        emails_seen.add(email)

        user = user_service.register_user(
            name=fake.name(),
            email=email,
            password=PASSWORD,
            birthdate=fake.date_of_birth(minimum_age=18, maximum_age=70),
            salary=Decimal(random.randint(2500, 15000)),
        )
        console.print(f"  Created user: {user.email} (id={user.id})")
        users.append(user)

    console.print(f"[green]{len(users)} users created.[/green]\n")
    return users


def _create_bills(bill_service: BillService, users: list[User]) -> int:
    """Give every user a mix of fixed, one-off and installment bills."""
    console.print("[cyan]Creating bills...[/cyan]")
    now = datetime.now(APP_TZ)

    table = Table(title="Bills per user")
    table.add_column("User", style="bold")
    table.add_column("Fixed", justify="right")
    table.add_column("Misc", justify="right")
    table.add_column("Installments", justify="right")
    table.add_column("Total value", justify="right")

    total = 0
    for user in users:
        assert user.id is not None
        fixed = random.sample(FIXED_TEMPLATES, k=random.randint(2, len(FIXED_TEMPLATES)))
        misc = random.sample(MISC_TEMPLATES, k=random.randint(1, len(MISC_TEMPLATES)))
        installments = random.sample(INSTALLMENT_TEMPLATES, k=random.randint(1, len(INSTALLMENT_TEMPLATES)))
        user_total = Decimal("0")

        for name, description, value in fixed:
            bill_service.create_bill(user.id, name, value, description)
            user_total += value

        for name, description, value in misc:
            # Some one-off bills fall in earlier months and drop out of this month's totals.
            created_at = now - timedelta(days=random.choice([0, 0, 35, 70]))
            bill_service.create_bill(user.id, name, value, description, 1, created_at)
            user_total += value

        for name, description, value, count in installments:
            created_at = now - timedelta(days=30 * random.randint(0, count + 1))
            bill_service.create_bill(user.id, name, value, description, count, created_at)
            user_total += value

        n_bills = len(fixed) + len(misc) + len(installments)
        total += n_bills
        table.add_row(
            user.name,
            str(len(fixed)),
            str(len(misc)),
            str(len(installments)),
            format_brl(user_total),
        )

    console.print(table)
    console.print(f"\n[green]{total} bills created.[/green]\n")
    return total


def _create_plannings(planning_service: PlanningService, users: list[User]) -> int:
    console.print("[cyan]Creating plannings...[/cyan]")
    count = 0
    for user in users:
        assert user.id is not None
        planning_service.create_planning(
            user_id=user.id,
            name="Reserva de emergência",
            goal="Juntar seis meses de despesas",
            goal_value=Decimal(random.randint(10, 60) * 1000),
            plan=fake.paragraph(nb_sentences=4),
            description=fake.sentence(),
        )
        count += 1
    console.print(f"[green]{count} plannings created.[/green]\n")
    return count


def main() -> None:
    console.print("[bold magenta]finplan: Database Seeder[/bold magenta]")
    console.print("=" * 40)

    initialize_db()
    conn = get_connection()

    _clear_all(conn)

    bill_repo = get_bill_repository()
    planning_repo = get_planning_repository()
    user_service = UserService(get_user_repository(), planning_repo)
    bill_service = BillService(bill_repo)
    planning_service = PlanningService(planning_repo)

    users = _create_users(user_service)
    total_bills = _create_bills(bill_service, users)
    total_plannings = _create_plannings(planning_service, users)

    console.print("[bold green]Seeding complete![/bold green]")
    console.print(f"  Users:      {len(users)}")
    console.print(f"  Bills:      {total_bills}")
    console.print(f"  Plannings:  {total_plannings}")
    console.print(f"\n  Login with: [bold]{MAIN_EMAIL}[/bold] / [bold]{PASSWORD}[/bold]")


if __name__ == "__main__":  # pragma: no cover
    main()

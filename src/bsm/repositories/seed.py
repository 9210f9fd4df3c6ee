from __future__ import annotations

from datetime import date, datetime

from bsm.domain.models import Client, Expense, Product, Reseller, Sale, SaleItem, User
from bsm.repositories.memory_store import MemoryStore
from bsm.repositories.passwords import hash_password


def _sale(sale_id, client, reseller, items, when) -> Sale:
    lines = tuple(SaleItem(product_id=p.id, product_name=p.name, quantity=q, unit_price=p.unit_price) for p, q in items)
    return Sale(
        id=sale_id,
        client_id=client.id,
        client_name=client.name,
        reseller_id=reseller.id,
        reseller_name=reseller.name,
        items=lines,
        total_amount=sum(line.line_total for line in lines),
        date=when,
    )


def seed_demo_data(store: MemoryStore) -> MemoryStore:
    """Load the demo catalogue: 5 clients, 3 resellers, 5 brownies, 5 sales, 5 expenses, 2 users."""
    clients = [
        Client("1", "Ana Silva", "(11) 99999-1234", datetime(2023, 10, 15), payment_date=date(2023, 11, 15)),
        Client("2", "Carlos Oliveira", "(11) 98765-4321", datetime(2023, 11, 5)),
        Client("3", "Mariana Costa", "(11) 97777-8888", datetime(2023, 12, 10), payment_date=date(2024, 1, 10)),
        Client("4", "João Pereira", "(11) 96666-5555", datetime(2024, 1, 20)),
        Client("5", "Juliana Santos", "(11) 95555-4444", datetime(2024, 2, 8), payment_date=date(2024, 3, 10)),
    ]
    resellers = [
        Reseller("1", "Pedro Almeida", "(11) 94444-3333", 15, datetime(2023, 9, 20)),
        Reseller("2", "Fernanda Lima", "(11) 93333-2222", 20, datetime(2023, 10, 25)),
        Reseller("3", "Ricardo Souza", "(11) 92222-1111", 18, datetime(2023, 12, 15)),
    ]
    products = [
        Product("1", "Brownie Tradicional", 45, 8.50, 3.20, datetime(2023, 10, 1)),
        Product("2", "Brownie com Nozes", 30, 10.00, 4.50, datetime(2023, 10, 1)),
        Product("3", "Brownie Recheado", 25, 12.50, 5.30, datetime(2023, 11, 15)),
        Product("4", "Brownie Vegano", 15, 14.00, 6.80, datetime(2024, 1, 10)),
        Product("5", "Brownie Zero Açúcar", 18, 15.00, 7.20, datetime(2024, 2, 5)),
    ]
    c, r, p = clients, resellers, products
    sales = [
        _sale("1", c[0], r[1], [(p[0], 5), (p[1], 3)], datetime(2024, 3, 15)),
        _sale("2", c[2], r[0], [(p[2], 8)], datetime(2024, 3, 18)),
        _sale("3", c[1], r[2], [(p[3], 4), (p[4], 2)], datetime(2024, 3, 20)),
        _sale("4", c[4], r[1], [(p[0], 10)], datetime(2024, 3, 23)),
        _sale("5", c[3], r[0], [(p[1], 6), (p[2], 4)], datetime(2024, 3, 25)),
    ]
    expenses = [
        Expense("1", "Chocolate em Barra", 20, 8.5, 170, datetime(2024, 3, 5)),
        Expense("2", "Açúcar", 15, 4.2, 63, datetime(2024, 3, 7)),
        Expense("3", "Nozes", 5, 25, 125, datetime(2024, 3, 10)),
        Expense("4", "Manteiga", 10, 7.5, 75, datetime(2024, 3, 15)),
        Expense("5", "Farinha", 25, 3.8, 95, datetime(2024, 3, 20)),
    ]
    users = [
        User("1", "admin", hash_password("admin123"), "Administrador", "admin", datetime(2024, 1, 1)),
        User("2", "vendedor1", hash_password("senha123"), "Vendedor Exemplo", "user", datetime(2024, 2, 1)),
    ]

    store.clients.load(clients)
    store.resellers.load(resellers)
    store.products.load(products)
    store.sales.load(sales)
    store.expenses.load(expenses)
    store.users.load(users)
    return store

"""Plain-text rendering of the dashboard views."""
from salet.dashboard.state import DashboardState
from salet.parse.aggregate import format_php

BAR_WIDTH = 40

ORDER_COLUMNS = [
    ("Order ID", "id"),
    ("Customer", "customer"),
    ("Product", "product"),
    ("Date", "date"),
    ("Payment", "payment_method"),
    ("Amount", "amount"),
    ("Status", "status"),
]


def render_metrics(state: DashboardState) -> str:
    return "\n".join(f"{m['title']:<16} {m['value']}" for m in state.metrics())


def render_monthly(state: DashboardState, metric: str = "revenue") -> str:
    """Horizontal bar chart of one monthly metric (revenue, orders or customers)."""
    monthly = state.data.monthly
    if not monthly:
        return "No monthly data"
    peak = max(getattr(m, metric) for m in monthly) or 1
    lines = []
    for m in monthly:
        value = getattr(m, metric)
        bar = "#" * max(0, round(BAR_WIDTH * value / peak))
        label = format_php(value) if metric == "revenue" else str(value)
        lines.append(f"{m.name:<9} {bar:<{BAR_WIDTH}} {label}")
    return "\n".join(lines)


def render_products(state: DashboardState) -> str:
    """Product revenue with share of the total."""
    products = state.data.products
    if not products:
        return "No product data"
    total = sum(p.value for p in products)
    lines = []
    for p in products:
        share = p.value * 100 / total if total else 0
        lines.append(f"{p.color} {p.name:<24} {format_php(p.value):>14} {share:5.1f}%")
    return "\n".join(lines)


def render_orders(state: DashboardState) -> str:
    orders = state.data.orders
    if not orders:
        return "No recent orders"
    rows = [[header for header, _ in ORDER_COLUMNS]]
    for order in orders:
        rows.append([str(getattr(order, attr)) for _, attr in ORDER_COLUMNS])
    widths = [max(len(row[i]) for row in rows) for i in range(len(ORDER_COLUMNS))]
    return "\n".join(
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)) for row in rows
    )


def render_dashboard(state: DashboardState) -> str:
    """Full dashboard, or the error screen when nothing could be loaded."""
    if state.error:
        return f"Error Loading Data\n{state.error}\nRun again to retry."

    sections = ["Sales Dashboard"]
    if state.from_cache:
        sections.append("(showing cached data)")
    sections += [
        render_metrics(state),
        "Revenue Trend",
        render_monthly(state),
        "Sales by Product",
        render_products(state),
        "Recent Orders",
        render_orders(state),
    ]
    return "\n\n".join(sections)

"""
Product list with statistics, filters and quick actions.
"""

import reflex as rx

from erp_ui.components.fields import empty_state, error_callout
from erp_ui.components.layout import page_header, protected
from erp_ui.state import ALL, ProductsState


def _stat(label: str, value: rx.Var) -> rx.Component:
    return rx.box(
        rx.text(label, class_name="muted", size="1"),
        rx.heading(value, size="4", as_="p"),
        class_name="card stat-card",
    )


def product_stats() -> rx.Component:
    return rx.grid(
        _stat("Produits", ProductsState.total_products),
        _stat("Actifs", ProductsState.active_products),
        _stat("Stock faible", ProductsState.low_stock_count),
        _stat("Rupture", ProductsState.out_of_stock_count),
        _stat("Valeur du stock", ProductsState.total_value),
        columns="5",
        spacing="3",
        width="100%",
    )


def _option_select(value: rx.Var, options: rx.Var, all_label: str, on_change) -> rx.Component:
    return rx.select.root(
        rx.select.trigger(),
        rx.select.content(
            rx.select.item(all_label, value=ALL),
            rx.foreach(options, lambda option: rx.select.item(option, value=option)),
        ),
        value=value,
        on_change=on_change,
    )


def product_filters() -> rx.Component:
    """Build the search input and filter selects."""
    return rx.box(
        rx.hstack(
            rx.box(
                rx.icon("search", class_name="input-icon"),
                rx.input(
                    placeholder="Rechercher par nom, description, référence, SKU...",
                    value=ProductsState.search,
                    on_change=ProductsState.set_search,
                    debounce_timeout=300,
                    class_name="search-input",
                ),
                class_name="input-with-icon",
                flex="1",
            ),
            _option_select(
                ProductsState.category, ProductsState.categories, "Toutes catégories", ProductsState.set_category
            ),
            _option_select(ProductsState.brand, ProductsState.brands, "Toutes marques", ProductsState.set_brand),
            rx.select.root(
                rx.select.trigger(),
                rx.select.content(
                    rx.select.item("Tous", value=ALL),
                    rx.select.item("Actifs", value="active"),
                    rx.select.item("Inactifs", value="inactive"),
                ),
                value=ProductsState.status,
                on_change=ProductsState.set_status,
            ),
            rx.hstack(
                rx.switch(checked=ProductsState.low_stock_only, on_change=ProductsState.set_low_stock_only),
                rx.text("Stock faible", size="2"),
                align="center",
            ),
            rx.cond(
                ProductsState.active_filter_count > 0,
                rx.button(
                    rx.icon("x", size=14),
                    "Effacer (",
                    ProductsState.active_filter_count,
                    ")",
                    variant="ghost",
                    on_click=ProductsState.clear_filters,
                ),
            ),
            spacing="3",
            align="center",
            width="100%",
        ),
        class_name="card search-card",
    )


def _stock_badge(product: rx.Var) -> rx.Component:
    return rx.match(
        product["stock_state"],
        ("out", rx.badge(product["stock"], color_scheme="red")),
        ("low", rx.badge(product["stock"], color_scheme="orange")),
        rx.badge(product["stock"], color_scheme="green"),
    )


def _product_row(product: rx.Var) -> rx.Component:
    return rx.table.row(
        rx.table.cell(
            rx.link(product["name"], href="/products/" + product["id"].to(str) + "/edit"),
        ),
        rx.table.cell(product["reference"]),
        rx.table.cell(product["category"]),
        rx.table.cell(product["brand"]),
        rx.table.cell(product["selling_price"]),
        rx.table.cell(product["margin"]),
        rx.table.cell(
            rx.hstack(
                rx.icon_button(
                    rx.icon("minus", size=12),
                    size="1",
                    variant="soft",
                    on_click=ProductsState.adjust_stock(product["id"], -1),
                ),
                _stock_badge(product),
                rx.icon_button(
                    rx.icon("plus", size=12),
                    size="1",
                    variant="soft",
                    on_click=ProductsState.adjust_stock(product["id"], 1),
                ),
                align="center",
            )
        ),
        rx.table.cell(
            rx.switch(
                checked=product["is_active"] == "true",
                on_change=lambda _: ProductsState.toggle_active(product["id"]),
            )
        ),
        rx.table.cell(
            rx.icon_button(
                rx.icon("trash-2", size=16),
                variant="ghost",
                color_scheme="red",
                on_click=ProductsState.delete(product["id"]),
            )
        ),
    )


def products_page() -> rx.Component:
    return protected(
        page_header(
            "Produits",
            rx.link(rx.button(rx.icon("plus", size=16), "Nouveau produit"), href="/products/new"),
        ),
        error_callout(ProductsState.error),
        product_stats(),
        product_filters(),
        rx.cond(
            ProductsState.is_empty,
            empty_state("package", "Aucun produit", "Aucun produit ne correspond aux filtres."),
            rx.box(
                rx.table.root(
                    rx.table.header(
                        rx.table.row(
                            *[
                                rx.table.column_header_cell(label)
                                for label in (
                                    "Nom",
                                    "Référence",
                                    "Catégorie",
                                    "Marque",
                                    "Prix de vente",
                                    "Marge",
                                    "Stock / min",
                                    "Actif",
                                    "",
                                )
                            ]
                        )
                    ),
                    rx.table.body(rx.foreach(ProductsState.products, _product_row)),
                    width="100%",
                ),
                class_name="card",
            ),
        ),
    )

"""
Product create/edit page.
"""

import reflex as rx

from erp_ui.components.fields import error_callout, form_field, text_area_field
from erp_ui.components.layout import page_header, protected
from erp_ui.state import ProductFormState


def _section(title: str, *fields: rx.Component) -> rx.Component:
    return rx.box(
        rx.heading(title, size="3", as_="h3"),
        rx.grid(*fields, columns="2", spacing="3", width="100%"),
        class_name="card form-section",
    )


def product_form() -> rx.Component:
    """Build the product form; values and errors come from ProductFormState."""
    values = ProductFormState.form_values
    errors = ProductFormState.form_errors
    return rx.form(
        rx.vstack(
            _section(
                "Informations générales",
                form_field("Nom", "name", values, errors, required=True),
                form_field("Référence", "reference", values, errors),
                form_field("SKU", "sku", values, errors),
                form_field("Catégorie", "category", values, errors),
                form_field("Marque", "brand", values, errors),
                text_area_field("Description", "description", values, errors),
            ),
            _section(
                "Prix",
                form_field("Prix de coût", "cost_price", values, errors, required=True),
                form_field("Prix de vente", "selling_price", values, errors, required=True),
            ),
            _section(
                "Stock",
                form_field("Quantité en stock", "stock_quantity", values, errors, type_="number"),
                form_field("Stock minimum", "min_stock_level", values, errors, type_="number"),
                form_field("Stock maximum", "max_stock_level", values, errors, type_="number"),
            ),
            _section(
                "Caractéristiques",
                form_field("Poids (kg)", "weight", values, errors),
                form_field("Dimensions", "dimensions", values, errors, placeholder="10x5x3"),
                rx.hstack(
                    rx.switch(checked=ProductFormState.is_active, on_change=ProductFormState.set_is_active),
                    rx.text("Produit actif"),
                    align="center",
                ),
            ),
            rx.hstack(
                rx.link(rx.button("Annuler", variant="soft", type="button"), href="/products"),
                rx.button("Enregistrer", type="submit"),
                justify="end",
                width="100%",
            ),
            spacing="4",
            width="100%",
        ),
        on_submit=ProductFormState.save,
        reset_on_submit=False,
        # Remount when switching between products so default values refresh
        key=ProductFormState.product_key,
    )


def product_form_page() -> rx.Component:
    return protected(
        page_header(ProductFormState.title),
        error_callout(ProductFormState.save_error),
        rx.cond(ProductFormState.not_found, rx.fragment(), product_form()),
    )

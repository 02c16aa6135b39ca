"""
Form building blocks shared by the record views.

Field errors come from a `dict[str, str]` state var (field -> message) and
are shown under the matching input.
"""

import reflex as rx


def field_error(errors: rx.Var, name: str) -> rx.Component:
    """Render the message for name, if any."""
    return rx.cond(
        errors.contains(name),
        rx.text(errors[name], class_name="field-error", size="1", color_scheme="red"),
    )


def form_field(
    label: str,
    name: str,
    values: rx.Var,
    errors: rx.Var,
    type_: str = "text",
    placeholder: str = "",
    required: bool = False,
) -> rx.Component:
    """
    Build a labelled input bound to a form submission.

    Args:
        label: Visible label.
        name: Form key, also the key in values and errors.
        values: dict[str, str] state var with initial values.
        errors: dict[str, str] state var with field errors.
        type_: HTML input type.
        placeholder: Placeholder text.
        required: Whether to mark the label as required.

    Returns:
        The field component.
    """
    return rx.box(
        rx.text(f"{label} *" if required else label, as_="label", size="2", weight="medium"),
        rx.input(
            name=name,
            type=type_,
            placeholder=placeholder,
            default_value=values[name].to(str),
            class_name="form-input",
        ),
        field_error(errors, name),
        class_name="form-field",
    )


def text_area_field(label: str, name: str, values: rx.Var, errors: rx.Var) -> rx.Component:
    return rx.box(
        rx.text(label, as_="label", size="2", weight="medium"),
        rx.text_area(name=name, default_value=values[name].to(str), class_name="form-input"),
        field_error(errors, name),
        class_name="form-field",
    )


def error_callout(message: rx.Var) -> rx.Component:
    """Show a service error when message is not empty."""
    return rx.cond(
        message != "",
        rx.callout(message, icon="triangle_alert", color_scheme="red", class_name="error-callout"),
    )


def loading_state(label: str = "Chargement...") -> rx.Component:
    return rx.box(
        rx.box(class_name="spinner"),
        rx.text(label, class_name="muted"),
        class_name="card loading-state",
    )


def empty_state(icon: str, title: str, message: str) -> rx.Component:
    return rx.box(
        rx.icon(icon, class_name="empty-icon", size=48),
        rx.heading(title, size="3", as_="h3"),
        rx.text(message, class_name="muted"),
        class_name="card empty-state",
    )

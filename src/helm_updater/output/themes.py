"""Update type color map."""

from helm_updater.models import UpdateType

UPDATE_COLORS: dict[UpdateType, str] = {
    UpdateType.MAJOR: "red bold",
    UpdateType.MINOR: "yellow",
    UpdateType.PATCH: "green",
}


def styled_update_type(update_type: UpdateType | None) -> str:
    if update_type is None:
        return "[dim]unknown[/dim]"
    color = UPDATE_COLORS.get(update_type, "white")
    return f"[{color}]{update_type.value}[/{color}]"

"""Layout and rendering of popup sessions onto a text grid.

Sections are laid out in a fixed order: switches, options, actions, then the
common commands when they are shown. Each non-empty section gets a heading
line followed by its buttons, left to right, wrapping when the next button
would overflow the width budget or the section's column limit.

    Switches
    a All (--all)      s Signoff (--signoff)

    Actions
    c Commit   e Extend   w Reword

PUBLIC API:
  - Theme: Rich styles for headings, keys and flags
  - Region: Clickable area of one button
  - Surface: Rendered lines plus button regions
  - layout: Project a session onto a Surface
  - button_label: Label text for one event
"""

from dataclasses import dataclass, field
from typing import Optional

from rich.text import Text

from .keys import COMMON_COMMANDS
from .session import Event, Session
from .types import Section, format_chord

__all__ = ["Theme", "Region", "Surface", "layout", "button_label"]

SECTION_HEADINGS: tuple[tuple[Section, str], ...] = (
    ("switches", "Switches"),
    ("options", "Options"),
    ("actions", "Actions"),
    ("commands", "Common Commands"),
)


@dataclass
class Theme:
    """Style theme for consistent popup appearance.

    Attributes:
        heading: Section heading styling.
        key: Button key styling.
        description: Button description styling.
        enabled: Flag styling for active switches and options.
        disabled: Flag styling for inactive switches and options.
        focus: Styling added to the focused button.
    """

    heading: str = "bold magenta"
    key: str = "bold cyan"
    description: str = ""
    enabled: str = "bold green"
    disabled: str = "dim"
    focus: str = "reverse"


@dataclass(frozen=True)
class Region:
    """Clickable area of one button.

    Attributes:
        section: Section the button belongs to.
        key: Event key, or the chord for common commands.
        row: Line index on the surface.
        column: Starting cell.
        width: Label width in cells.
    """

    section: Section
    key: str
    row: int
    column: int
    width: int

    def contains(self, row: int, column: int) -> bool:
        return row == self.row and self.column <= column < self.column + self.width


@dataclass
class Surface:
    """Rendered popup: styled lines and the button regions on them.

    Attributes:
        lines: One rich Text per line.
        regions: Button regions in navigation order.
        column_widths: Column stride of each laid-out section.
        focus: (section, key) of the focused button, if any.
    """

    lines: list[Text] = field(default_factory=list)
    regions: list[Region] = field(default_factory=list)
    column_widths: dict[str, int] = field(default_factory=dict)
    focus: Optional[tuple[Section, str]] = None

    def region_at(self, row: int, column: int) -> Optional[Region]:
        """Find the button at a cell."""
        for region in self.regions:
            if region.contains(row, column):
                return region
        return None

    def region_for(self, section: Section, key: str) -> Optional[Region]:
        """Find the button for an event."""
        for region in self.regions:
            if region.section == section and region.key == key:
                return region
        return None

    def rows(self, section: Section) -> list[list[Region]]:
        """Group a section's regions by line."""
        grouped: dict[int, list[Region]] = {}
        for region in self.regions:
            if region.section == section:
                grouped.setdefault(region.row, []).append(region)
        return [grouped[row] for row in sorted(grouped)]

    def render(self) -> Text:
        """Join lines into a single Text."""
        return Text("\n").join(self.lines)

    def plain(self) -> str:
        """Unstyled text of the surface."""
        return "\n".join(line.plain.rstrip() for line in self.lines)


def button_label(event: Event, theme: Optional[Theme] = None) -> Text:
    """Build the label for one event.

    Switches and options show key, description and flag; the flag is dimmed
    while inactive and highlighted, with the option value, while active.
    Actions show key and description only.
    """
    theme = theme or Theme()
    label = Text.assemble((format_chord(event.key), theme.key), " ", (event.description, theme.description))

    if event.flag is None:
        return label

    if event.enabled:
        shown = event.flag if event.section == "switches" else event.flag + (event.value or "")
        label.append(" (")
        label.append(shown, style=theme.enabled)
        label.append(")")
    else:
        label.append(" (")
        label.append(event.flag, style=theme.disabled)
        label.append(")")
    return label


def _command_label(chord: str, description: str, theme: Theme) -> Text:
    return Text.assemble((format_chord(chord), theme.key), " ", (description, theme.description))


def _resolve_focus(
    regions: list[Region], focus: Optional[tuple[Section, str]]
) -> Optional[tuple[Section, str]]:
    """Keep the requested focus if its button exists, else fall back."""
    if focus is not None:
        for region in regions:
            if (region.section, region.key) == focus:
                return focus
    for region in regions:
        if region.section == "actions":
            return (region.section, region.key)
    if regions:
        return (regions[0].section, regions[0].key)
    return None


def layout(
    session: Session,
    *,
    width: int = 80,
    min_padding: int = 3,
    show_common_commands: bool = False,
    focus: Optional[tuple[Section, str]] = None,
    theme: Optional[Theme] = None,
) -> Surface:
    """Project a session onto a text surface.

    Column width is uniform per section: the widest label plus min_padding.
    A row holds as many columns as fit in width, capped by the definition's
    max_columns for the section, and never fewer than one.

    Args:
        session: Session to render.
        width: Width budget in cells. Defaults to 80.
        min_padding: Padding added to the widest label. Defaults to 3.
        show_common_commands: Append the common commands section.
        focus: (section, key) to focus; falls back to the first action.
        theme: Styles. Defaults to Theme().

    Returns:
        Surface with lines, regions and the resolved focus.
    """
    theme = theme or Theme()
    surface = Surface()
    max_columns = session.definition.max_columns

    for section, heading in SECTION_HEADINGS:
        if section == "commands":
            if not show_common_commands:
                continue
            buttons = [(b.chord, _command_label(b.chord, b.description, theme)) for b in COMMON_COMMANDS]
        else:
            buttons = [(event.key, button_label(event, theme)) for event in session.events(section)]

        if not buttons:
            continue

        if surface.lines:
            surface.lines.append(Text(""))
        surface.lines.append(Text(heading, style=theme.heading))

        column_width = max(label.cell_len for _, label in buttons) + min_padding
        columns = max(1, width // column_width)
        if max_columns.get(section):
            columns = min(columns, max_columns[section])
        surface.column_widths[section] = column_width

        for start in range(0, len(buttons), columns):
            row = len(surface.lines)
            line = Text()
            chunk = buttons[start : start + columns]
            for index, (key, label) in enumerate(chunk):
                column = index * column_width
                line.append_text(label)
                if index < len(chunk) - 1:
                    line.append(" " * (column_width - label.cell_len))
                surface.regions.append(Region(section, key, row, column, label.cell_len))
            surface.lines.append(line)

    surface.focus = _resolve_focus(surface.regions, focus)
    if surface.focus is not None:
        region = surface.region_for(*surface.focus)
        if region is not None:
            surface.lines[region.row].stylize(theme.focus, region.column, region.column + region.width)

    return surface

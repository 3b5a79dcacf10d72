from dataclasses import dataclass

# Palette stops used by the dashboard templates: background, accent, header.
THEMES: dict[str, dict[str, str]] = {
    "original": {"label": "Original (Azul Acero)", "50": "#f0f4f8", "600": "#486581", "900": "#102a43"},
    "neutral": {"label": "Neutro (Gris Clásico)", "50": "#f9fafb", "600": "#4b5563", "900": "#111827"},
    "zinc": {"label": "Zinc (Alto Contraste)", "50": "#fafafa", "600": "#52525b", "900": "#18181b"},
    "blue": {"label": "Corporativo (Azul Real)", "50": "#eff6ff", "600": "#2563eb", "900": "#1e3a8a"},
    "emerald": {"label": "Institucional (Verde)", "50": "#ecfdf5", "600": "#059669", "900": "#064e3b"},
}


@dataclass(frozen=True)
class DisplayConfig:
    theme: str = "original"
    full_width: bool = False

    @property
    def palette(self) -> dict[str, str]:
        return THEMES[self.theme]


def make_display_config(theme: str, full_width: bool) -> DisplayConfig:
    if theme not in THEMES:
        raise ValueError(f"unknown theme: {theme}")
    return DisplayConfig(theme=theme, full_width=full_width)

from __future__ import annotations

from chart_engine.analytics.templates import list_templates


def main(argv: list[str] | None = None) -> int:
    for template in list_templates():
        required = ", ".join(template.required.names()) or "-"
        print(f"{template.id:<16} {template.kind.value:<12} {required}")
    return 0

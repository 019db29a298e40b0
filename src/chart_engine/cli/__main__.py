from __future__ import annotations

import sys

from chart_engine.cli.doctor import main as doctor_main
from chart_engine.cli.render import main as render_main
from chart_engine.cli.templates import main as templates_main


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    if not argv or argv[0] in {"-h", "--help"}:
        print("Usage: python -m chart_engine.cli <command>\n")
        print("Commands:")
        print("  templates   List chart templates and the fields they require")
        print("  render      Aggregate a CSV and render one chart to PNG")
        print("  doctor      Validate environment and write a render_record.json\n")
        return 0

    cmd = argv[0]
    if cmd == "templates":
        return templates_main(argv[1:])
    if cmd == "render":
        return render_main(argv[1:])
    if cmd == "doctor":
        return doctor_main(argv[1:])

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())

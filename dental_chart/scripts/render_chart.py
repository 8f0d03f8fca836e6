from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from dental_chart.core.settings import settings
from dental_chart.schemas.chart import ChartRenderRequest
from dental_chart.services.chart_pdf import build_chart_pdf
from dental_chart.services.chart_svg import render_svg
from dental_chart.services.dispatcher import LAYOUT_STRATEGIES, RenderingDispatcher, render_request
from dental_chart.services.preferences import DesignPreferenceStore, InMemoryStorage
from dental_chart.services.sample_chart import sample_snapshot
from dental_chart.services.tooth_numbering import from_fdi

logger = logging.getLogger("dental_chart.cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a dental chart snapshot to SVG, PDF or JSON.")
    parser.add_argument(
        "input",
        help="Path to a JSON chart snapshot (tooth number -> record), or 'sample' for the demo chart.",
    )
    parser.add_argument(
        "--design",
        default=None,
        help=f"Layout to use ({', '.join(d.value for d in LAYOUT_STRATEGIES)}). Defaults to DEFAULT_DESIGN.",
    )
    parser.add_argument("--format", choices=["svg", "pdf", "json"], default="svg")
    parser.add_argument("--output", default=None, help="Output file. Defaults to stdout for svg/json.")
    parser.add_argument("--selected", type=int, default=None, help="Tooth number to select.")
    parser.add_argument(
        "--notation",
        choices=["universal", "fdi"],
        default="universal",
        help="Numbering used by the snapshot keys and --selected. FDI numbers are converted to universal.",
    )
    parser.add_argument("--density", choices=["overview", "detailed"], default="overview")
    parser.add_argument(
        "--clinical-view", choices=["treatments", "periodontal", "planning"], default="treatments"
    )
    return parser.parse_args(argv)


def _load_snapshot(source: str) -> dict:
    if source == "sample":
        return {"teeth": sample_snapshot()}
    payload = json.loads(Path(source).read_text(encoding="utf-8"))
    if isinstance(payload, dict) and "teeth" in payload:
        return payload
    return {"teeth": payload}


def _fdi_to_universal(teeth):
    if isinstance(teeth, dict):
        entries = list(teeth.items())
    elif isinstance(teeth, list):
        entries = [(item.get("number"), item) for item in teeth if isinstance(item, dict)]
    else:
        return teeth
    converted: dict[str, object] = {}
    for key, record in entries:
        try:
            number = from_fdi(int(key))
        except (TypeError, ValueError):
            logger.warning("Ignoring tooth %r: not an FDI tooth number", key)
            continue
        if isinstance(record, dict) and "number" in record:
            record = {**record, "number": number}
        converted[str(number)] = record
    return converted


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    try:
        payload = _load_snapshot(args.input)
        selected = args.selected
        if args.notation == "fdi":
            payload = {**payload, "teeth": _fdi_to_universal(payload.get("teeth"))}
            if selected is not None:
                selected = from_fdi(selected)
        request = ChartRenderRequest.model_validate(
            {
                **payload,
                "design": args.design,
                "selected": selected,
                "density": args.density,
                "clinical_view": args.clinical_view,
            }
        )
    except (OSError, ValueError, ValidationError) as exc:
        logger.error("Could not read chart snapshot %s: %s", args.input, exc)
        return 2

    preferences = DesignPreferenceStore(InMemoryStorage(), default=settings.default_design)
    dispatcher = RenderingDispatcher(preferences)
    view = render_request(dispatcher, request)

    if args.format == "pdf":
        if not args.output:
            logger.error("--output is required for PDF export")
            return 2
        Path(args.output).write_bytes(build_chart_pdf(view))
    else:
        text = render_svg(view) if args.format == "svg" else view.model_dump_json(indent=2)
        if args.output:
            Path(args.output).write_text(text + "\n", encoding="utf-8")
        else:
            sys.stdout.write(text + "\n")
    if args.output:
        logger.info("Wrote %s chart (%s) to %s", args.format, view.design, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

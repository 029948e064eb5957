import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from config.settings import Settings, settings
from schemas.grades import StudentEvaluation
from services.evaluation_service import GradeEvaluationService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="main.py",
        description=f"{settings.APP_TITLE}: evalúa las calificaciones de un estudiante (JSON) y muestra el resultado",
    )
    parser.add_argument("file", help="JSON con student_id, period_id y subjects[]")
    parser.add_argument("--excluded", default=None, help='IDs excluidos de promedios, ej: "9,11" (por defecto: settings)')
    parser.add_argument("--indent", type=int, default=2, help="sangría del JSON de salida")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # ✅ logging a nivel de configuración (los módulos del motor solo crean su logger)
    logging.basicConfig(level=settings.LOG_LEVEL)

    try:
        config = settings if args.excluded is None else Settings(EXCLUDED_SUBJECT_IDS=args.excluded)
        evaluation = StudentEvaluation.model_validate_json(Path(args.file).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValidationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    result = GradeEvaluationService(config).evaluate(evaluation)
    print(result.model_dump_json(indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())

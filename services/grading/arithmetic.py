"""
services/grading/arithmetic.py

- Nota final de una asignatura a partir de sus tres lapsos.
- Valor efectivo de un lapso = ajuste si existe, si no la nota original, si no "sin dato".
- No revalida rangos: quien llama debe pasar antes por validation.validate_edit.
"""

import logging
from typing import Optional, Tuple

from schemas.grades import GradeField, SubjectGrade
from services.grading.constants import LAPSO_COUNT
from utils.rounding import mean, round_half_up

logger = logging.getLogger(__name__)

PERIODS = tuple(range(1, LAPSO_COUNT + 1))

# Nota final cuando falta algún lapso. Se conserva por compatibilidad:
# "sin calificar" se lee como reprobado (ver DESIGN.md, preguntas abiertas).
INCOMPLETE_FINAL_GRADE = 0

_LAPSO_FIELDS = {
    1: (GradeField.LAPSO_1, GradeField.LAPSO_1_ADJUSTED),
    2: (GradeField.LAPSO_2, GradeField.LAPSO_2_ADJUSTED),
    3: (GradeField.LAPSO_3, GradeField.LAPSO_3_ADJUSTED),
}


def lapso_fields(period: int) -> Tuple[GradeField, GradeField]:
    """(campo original, campo ajustado) del lapso indicado"""
    try:
        return _LAPSO_FIELDS[period]
    except KeyError:
        raise ValueError(f"Lapso inválido: {period} (debe ser 1, 2 o 3)")


def effective_lapso(subject: SubjectGrade, period: int) -> Optional[float]:
    raw_field, adjusted_field = lapso_fields(period)
    adjusted = subject.get(adjusted_field)
    if adjusted is not None:
        return adjusted
    return subject.get(raw_field)


def effective_lapsos(subject: SubjectGrade) -> Tuple[Optional[float], ...]:
    return tuple(effective_lapso(subject, p) for p in PERIODS)


def is_complete(subject: SubjectGrade) -> bool:
    """True si los tres lapsos tienen valor efectivo"""
    return all(v is not None for v in effective_lapsos(subject))


def compute_final_grade(subject: SubjectGrade) -> int:
    values = effective_lapsos(subject)
    if any(v is None for v in values):
        logger.debug(f"subject={subject.subject_id} lapsos={values} incompleto → {INCOMPLETE_FINAL_GRADE}")
        return INCOMPLETE_FINAL_GRADE

    result = int(round_half_up(mean(values)))
    logger.debug(f"subject={subject.subject_id} lapsos={values} → {result}")
    return result

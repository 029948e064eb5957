"""
services/grading/aggregate.py

Promedios por lapso, promedio final, conteos de pendientes/reprobadas y resultado general
de un estudiante. Todo se recalcula desde cero en cada llamada (sin estado incremental).

- Las asignaturas excluidas (settings.excluded_subject_ids, hoy {9, 11}) no cuentan
  en ningún promedio ni conteo.
- Promedio de un conjunto vacío = None (a diferencia de la nota final incompleta, que vale 0).
"""

import logging
from decimal import Decimal
from typing import FrozenSet, Iterable, List, Optional

from config.settings import settings
from schemas.common import ErrorCode, ErrorDetail
from schemas.grades import (
    OverallOutcome,
    PeriodAverages,
    StudentEvaluation,
    StudentEvaluationResult,
    SubjectGrade,
    SubjectResult,
    SubjectStatus,
)
from services.grading.arithmetic import compute_final_grade, effective_lapso
from services.grading.classifier import (
    classify_subject_status,
    is_in_revision,
    is_pending,
    is_remedial_pending,
)
from services.grading.constants import MSG_STALE_REVISION, REPEAT_THRESHOLD
from utils.rounding import mean, round_half_up

logger = logging.getLogger(__name__)

AVERAGE_DECIMALS = 2


def resolve_excluded(excluded_subject_ids: Optional[Iterable[int]] = None) -> FrozenSet[int]:
    """None → lista configurada en settings"""
    if excluded_subject_ids is None:
        return settings.excluded_subject_ids
    return frozenset(excluded_subject_ids)


def included_subjects(
    subjects: Iterable[SubjectGrade],
    excluded_subject_ids: Optional[Iterable[int]] = None,
) -> List[SubjectGrade]:
    excluded = resolve_excluded(excluded_subject_ids)
    return [s for s in subjects if s.subject_id not in excluded]


def valid_grade(subject: SubjectGrade) -> float:
    """Revisión si existe; si no, la nota final calculada"""
    if subject.revision is not None:
        return float(subject.revision)
    return float(compute_final_grade(subject))


def _rounded(value: Optional[Decimal]) -> Optional[float]:
    if value is None:
        return None
    return float(round_half_up(value, AVERAGE_DECIMALS))


def period_average(
    subjects: Iterable[SubjectGrade],
    period: int,
    excluded_subject_ids: Optional[Iterable[int]] = None,
) -> Optional[float]:
    values = [effective_lapso(s, period) for s in included_subjects(subjects, excluded_subject_ids)]
    return _rounded(mean(v for v in values if v is not None))


def final_average(
    subjects: Iterable[SubjectGrade],
    excluded_subject_ids: Optional[Iterable[int]] = None,
) -> Optional[float]:
    return _rounded(mean(valid_grade(s) for s in included_subjects(subjects, excluded_subject_ids)))


def count_pending(subjects: Iterable[SubjectGrade], excluded_subject_ids: Optional[Iterable[int]] = None) -> int:
    return sum(1 for s in included_subjects(subjects, excluded_subject_ids) if is_pending(s))


def count_failed(subjects: Iterable[SubjectGrade], excluded_subject_ids: Optional[Iterable[int]] = None) -> int:
    return sum(1 for s in included_subjects(subjects, excluded_subject_ids) if is_in_revision(s))


def count_remedial_pending(
    subjects: Iterable[SubjectGrade],
    excluded_subject_ids: Optional[Iterable[int]] = None,
) -> int:
    return sum(1 for s in included_subjects(subjects, excluded_subject_ids) if is_remedial_pending(s))


def overall_outcome(remedial_pending_count: int) -> OverallOutcome:
    if remedial_pending_count >= REPEAT_THRESHOLD:
        return OverallOutcome.REPITE
    return OverallOutcome.APROBADO


def evaluate_student(
    evaluation: StudentEvaluation,
    excluded_subject_ids: Optional[Iterable[int]] = None,
) -> StudentEvaluationResult:
    excluded = resolve_excluded(excluded_subject_ids)
    subjects = evaluation.subjects

    remedial_pending = count_remedial_pending(subjects, excluded)

    results = []
    for subject in subjects:
        status = classify_subject_status(subject, remedial_pending)
        error = None
        if status == SubjectStatus.ERROR:
            error = ErrorDetail(code=ErrorCode.INCONSISTENT_STATE, message=MSG_STALE_REVISION)
        results.append(SubjectResult(
            subject_id=subject.subject_id,
            final_grade=compute_final_grade(subject),
            valid_grade=valid_grade(subject),
            status=status,
            excluded=subject.subject_id in excluded,
            error=error,
        ))

    result = StudentEvaluationResult(
        student_id=evaluation.student_id,
        period_id=evaluation.period_id,
        period_averages=PeriodAverages(
            p1=period_average(subjects, 1, excluded),
            p2=period_average(subjects, 2, excluded),
            p3=period_average(subjects, 3, excluded),
        ),
        final_average=final_average(subjects, excluded),
        pending_count=count_pending(subjects, excluded),
        failed_count=count_failed(subjects, excluded),
        remedial_pending_count=remedial_pending,
        overall_outcome=overall_outcome(remedial_pending),
        subjects=results,
        inconsistent_subject_ids=[r.subject_id for r in results if r.status == SubjectStatus.ERROR],
    )
    logger.debug(
        f"student={evaluation.student_id} final_avg={result.final_average} "
        f"pending={result.pending_count} remedial={remedial_pending} → {result.overall_outcome.value}"
    )
    return result

"""
services/grading/history.py

Fila del historial académico al cerrar el período: promedio anual + estatus.
A diferencia de final_average (None si no hay datos), el historial guarda 0.0.
"""

from typing import Iterable, Optional

from schemas.grades import HistoryRecord, HistoryStatus, StudentEvaluation, SubjectGrade
from services.grading.aggregate import final_average
from services.grading.constants import PASSING_ANNUAL_AVERAGE


def annual_average(
    subjects: Iterable[SubjectGrade],
    excluded_subject_ids: Optional[Iterable[int]] = None,
) -> float:
    average = final_average(subjects, excluded_subject_ids)
    return 0.0 if average is None else average


def history_status(average: float) -> HistoryStatus:
    if average >= PASSING_ANNUAL_AVERAGE:
        return HistoryStatus.APROBADO
    return HistoryStatus.REPROBADO


def build_history_record(
    evaluation: StudentEvaluation,
    section_id: Optional[int] = None,
    excluded_subject_ids: Optional[Iterable[int]] = None,
) -> HistoryRecord:
    average = annual_average(evaluation.subjects, excluded_subject_ids)
    return HistoryRecord(
        student_id=evaluation.student_id,
        period_id=evaluation.period_id,
        section_id=section_id,
        annual_average=average,
        status=history_status(average),
    )

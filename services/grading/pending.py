"""
services/grading/pending.py

Registro de asignaturas pendientes (materias que el estudiante arrastra al año siguiente).
Se valida antes de enviarlas a persistencia:
- la selección no puede estar vacía
- si más de MAX_CARRIED_SUBJECTS quedan aplazadas, el estudiante repite el año
"""

import logging
from typing import Iterable

from schemas.grades import SubjectGrade
from services.grading.arithmetic import compute_final_grade
from services.grading.constants import MAX_CARRIED_SUBJECTS, PASSING_FINAL_GRADE, PASSING_REVISION
from services.grading.exceptions import PendingSubjectsError

logger = logging.getLogger(__name__)


def is_deferred(subject: SubjectGrade) -> bool:
    """Aplazada: revisión < 10 si la hay; si no, nota final < 9.5"""
    if subject.revision is not None:
        return subject.revision < PASSING_REVISION
    return compute_final_grade(subject) < PASSING_FINAL_GRADE


def count_deferred(subjects: Iterable[SubjectGrade]) -> int:
    return sum(1 for s in subjects if is_deferred(s))


def validate_pending_subjects(subjects: Iterable[SubjectGrade]) -> int:
    """Devuelve el número de aplazadas si la selección es registrable; si no, PendingSubjectsError."""
    selected = list(subjects)
    if not selected:
        raise PendingSubjectsError(
            "No hay asignaturas pendientes para guardar. Selecciona al menos una asignatura."
        )

    deferred = count_deferred(selected)
    if deferred > MAX_CARRIED_SUBJECTS:
        logger.info(f"pendientes rechazadas: {deferred} aplazadas (máximo {MAX_CARRIED_SUBJECTS})")
        raise PendingSubjectsError(
            f"El estudiante debe repetir el año escolar. Asignaturas aplazadas: {deferred}",
            deferred_count=deferred,
        )
    return deferred

"""
services/grading/classifier.py

Estado de una asignatura: Aprobado / Pendiente / Repite / Revisión / Error.
El orden de las reglas importa (la primera que aplica gana).
"""

import logging

from schemas.grades import SubjectGrade, SubjectStatus
from services.grading.arithmetic import compute_final_grade
from services.grading.constants import PASSING_FINAL_GRADE, PASSING_REVISION, REPEAT_THRESHOLD

logger = logging.getLogger(__name__)


def is_in_revision(subject: SubjectGrade) -> bool:
    """Nota final reprobada: habilita la revisión"""
    return compute_final_grade(subject) < PASSING_FINAL_GRADE


def is_remedial_pending(subject: SubjectGrade) -> bool:
    """Reprobada, con revisión cargada y también reprobada"""
    return (
        is_in_revision(subject)
        and subject.revision is not None
        and subject.revision < PASSING_REVISION
    )


def is_pending(subject: SubjectGrade) -> bool:
    """Reprobada y sin revisión, o con revisión reprobada. Revisión ≥ 10 la saca."""
    return is_in_revision(subject) and (subject.revision is None or subject.revision < PASSING_REVISION)


def classify_subject_status(subject: SubjectGrade, total_remedial_pending: int) -> SubjectStatus:
    final_grade = compute_final_grade(subject)
    revision = subject.revision

    # 1) aprobada con revisión cargada: dato viejo que hay que borrar a mano
    if final_grade >= PASSING_FINAL_GRADE and revision is not None:
        logger.debug(f"subject={subject.subject_id} final={final_grade} revision={revision} → Error")
        return SubjectStatus.ERROR
    # 2)
    if final_grade >= PASSING_FINAL_GRADE:
        return SubjectStatus.APROBADO
    # 3) reprobada sin revisión todavía
    if revision is None:
        return SubjectStatus.REVISION
    # 4) la revisión decide
    if revision >= PASSING_REVISION:
        return SubjectStatus.APROBADO
    if total_remedial_pending >= REPEAT_THRESHOLD:
        return SubjectStatus.REPITE
    return SubjectStatus.PENDIENTE

import logging
from typing import Iterable, Optional

from config.settings import Settings, settings as default_settings
from schemas.grades import (
    GradeField,
    HistoryRecord,
    StudentEvaluation,
    StudentEvaluationResult,
    SubjectGrade,
)
from services.grading.aggregate import evaluate_student
from services.grading.arithmetic import compute_final_grade
from services.grading.exceptions import SaveBlockedError
from services.grading.history import build_history_record
from services.grading.pending import validate_pending_subjects
from services.grading.validation import FieldErrorRegistry, RawInput, apply_edit

logger = logging.getLogger(__name__)


class GradeEvaluationService:
    """
    Lado del que llama al motor (pantalla de calificaciones o proceso por lotes).
    - Cada edición se valida ANTES de recalcular la nota final.
    - Los errores de campo quedan en un FieldErrorRegistry que es del que llama.
    - Si los errores bloquean o no el guardado depende de BLOCK_SAVE_ON_FIELD_ERRORS.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.excluded_subject_ids = self.config.excluded_subject_ids
        self.block_save_on_errors = self.config.BLOCK_SAVE_ON_FIELD_ERRORS

    # ==========================================================
    # Edición
    # ==========================================================
    def apply_edit(
        self,
        subject: SubjectGrade,
        field: GradeField,
        raw_input: RawInput,
        registry: FieldErrorRegistry,
    ) -> SubjectGrade:
        updated, results = apply_edit(subject, field, raw_input)
        for edited_field, result in results.items():
            registry.record(subject.subject_id, edited_field, result)
        return updated

    def final_grade(self, subject: SubjectGrade) -> int:
        return compute_final_grade(subject)

    # ==========================================================
    # Evaluación
    # ==========================================================
    def evaluate(self, evaluation: StudentEvaluation) -> StudentEvaluationResult:
        result = evaluate_student(evaluation, self.excluded_subject_ids)
        for subject in result.subjects:
            if subject.error is not None:
                logger.warning(
                    f"Estudiante {evaluation.student_id}: asignatura {subject.subject_id}: "
                    f"{subject.error.message} ({subject.error.code.value})"
                )
        logger.info(
            f"Estudiante {evaluation.student_id} período {evaluation.period_id}: "
            f"promedio={result.final_average} pendientes={result.pending_count} "
            f"resultado={result.overall_outcome.value}"
        )
        return result

    def history_record(self, evaluation: StudentEvaluation, section_id: Optional[int] = None) -> HistoryRecord:
        return build_history_record(evaluation, section_id, self.excluded_subject_ids)

    def check_pending_subjects(self, subjects: Iterable[SubjectGrade]) -> int:
        return validate_pending_subjects(subjects)

    # ==========================================================
    # Compuerta de guardado
    # ==========================================================
    def can_save(self, registry: FieldErrorRegistry) -> bool:
        return not (self.block_save_on_errors and registry.has_errors())

    def ensure_can_save(self, registry: FieldErrorRegistry) -> None:
        if not registry.has_errors():
            return
        if self.block_save_on_errors:
            raise SaveBlockedError(registry.as_display_dict())
        logger.warning(f"Guardando con {len(registry)} error(es) de campo sin resolver (solo aviso)")


# ✅ instancia compartida con la configuración del entorno
evaluation_service = GradeEvaluationService()

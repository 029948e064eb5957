"""
services/grading/validation.py

- validate_edit: valida lo que el usuario escribe en un campo de calificación.
  Nunca lanza excepción: devuelve un valor utilizable (recortado si hace falta) + mensaje.
- apply_edit: valida y devuelve una copia del registro con el campo reemplazado.
- FieldErrorRegistry: errores pendientes por (asignatura, campo).
"""

import logging
import math
from typing import Dict, Optional, Tuple, Union

from schemas.common import ErrorCode, ErrorDetail
from schemas.grades import EditResult, GradeField, SubjectGrade
from services.grading.constants import (
    ADJUSTMENT_SPAN,
    MAX_SCORE,
    MIN_SCORE,
    MSG_ADJUSTMENT_ABOVE,
    MSG_ADJUSTMENT_BELOW,
    MSG_MAX_SCORE,
    MSG_MIN_SCORE,
    MSG_NOT_NUMERIC,
)

logger = logging.getLogger(__name__)

RawInput = Union[str, int, float, None]


def _parse(raw_input: RawInput) -> Tuple[Optional[float], bool]:
    """(valor, es_numérico). Vacío → (None, True). Acepta coma decimal."""
    text = "" if raw_input is None else str(raw_input).strip()
    if text == "":
        return None, True
    try:
        value = float(text.replace(",", "."))
    except ValueError:
        return None, False
    if not math.isfinite(value):
        return None, False
    return value, True


def validate_edit(subject: SubjectGrade, field: GradeField, raw_input: RawInput) -> EditResult:
    field = GradeField(field)
    value, numeric = _parse(raw_input)

    if not numeric:
        return EditResult(value=None, error=MSG_NOT_NUMERIC, code=ErrorCode.NOT_NUMERIC)
    if value is None:
        # campo vacío: se limpia sin error
        return EditResult(value=None)

    error, code = "", None

    # rango de la escala (también aplica a la revisión)
    if value > MAX_SCORE:
        value, error, code = float(MAX_SCORE), MSG_MAX_SCORE, ErrorCode.RANGE_ERROR
    if value < MIN_SCORE:
        value, error, code = float(MIN_SCORE), MSG_MIN_SCORE, ErrorCode.RANGE_ERROR

    # banda del ajuste; el último mensaje aplicado es el que se muestra
    if field.is_adjustment:
        base = subject.get(field.base_field)
        base = float(MIN_SCORE) if base is None else float(base)
        if value < base:
            value, error, code = base, MSG_ADJUSTMENT_BELOW, ErrorCode.ADJUSTMENT_BOUND_ERROR
        if value > base + ADJUSTMENT_SPAN:
            value, error, code = base + ADJUSTMENT_SPAN, MSG_ADJUSTMENT_ABOVE, ErrorCode.ADJUSTMENT_BOUND_ERROR

    if error:
        logger.debug(f"subject={subject.subject_id} field={field.value} input={raw_input!r} → {value} ({code.value})")
    return EditResult(value=value, error=error, code=code)


def apply_edit(
    subject: SubjectGrade,
    field: GradeField,
    raw_input: RawInput,
) -> Tuple[SubjectGrade, Dict[GradeField, EditResult]]:
    """
    Valida primero y luego produce el registro nuevo (el original no se modifica).
    Si se cambia la nota original de un lapso que ya tiene ajuste, el ajuste se vuelve a
    recortar a [nueva original, nueva original + 2] en la misma copia.
    Devuelve los resultados por campo: siempre el editado, y el ajuste solo si se recortó.
    """
    field = GradeField(field)
    result = validate_edit(subject, field, raw_input)
    updates = {field.value: result.value}
    results = {field: result}

    partner = field.adjustment_field
    if partner is not None and subject.get(partner) is not None:
        rebased = subject.model_copy(update=updates)
        partner_result = validate_edit(rebased, partner, subject.get(partner))
        if not partner_result.ok:
            updates[partner.value] = partner_result.value
            results[partner] = partner_result

    return subject.model_copy(update=updates), results


class FieldErrorRegistry:
    """
    Errores de validación pendientes, uno por (subject_id, campo).
    Una edición válida limpia solo el error de SU campo; los demás se conservan.
    """

    def __init__(self):
        self._errors: Dict[Tuple[int, GradeField], ErrorDetail] = {}

    def record(self, subject_id: int, field: GradeField, result: EditResult) -> None:
        key = (subject_id, GradeField(field))
        detail = result.detail()
        if detail is None:
            self._errors.pop(key, None)
        else:
            self._errors[key] = detail

    def get(self, subject_id: int, field: GradeField) -> Optional[ErrorDetail]:
        return self._errors.get((subject_id, GradeField(field)))

    def for_subject(self, subject_id: int) -> Dict[GradeField, ErrorDetail]:
        return {f: d for (sid, f), d in self._errors.items() if sid == subject_id}

    def has_errors(self) -> bool:
        return bool(self._errors)

    def clear(self) -> None:
        self._errors.clear()

    def as_display_dict(self) -> Dict[str, str]:
        """Formato para la vista: {"3_lapso_1": "La calificación máxima es 20"}"""
        return {f"{sid}_{f.value}": d.message for (sid, f), d in self._errors.items()}

    def __len__(self) -> int:
        return len(self._errors)

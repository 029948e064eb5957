# schemas/grades.py
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.common import ErrorCode, ErrorDetail

# Escala venezolana 0..20 (los mismos límites viven en services/grading/constants.py)
Score = Optional[float]


class GradeField(str, Enum):
    """Campos editables de una calificación"""
    LAPSO_1 = "lapso_1"
    LAPSO_2 = "lapso_2"
    LAPSO_3 = "lapso_3"
    LAPSO_1_ADJUSTED = "lapso_1_adjusted"
    LAPSO_2_ADJUSTED = "lapso_2_adjusted"
    LAPSO_3_ADJUSTED = "lapso_3_adjusted"
    REVISION = "revision"

    @property
    def is_adjustment(self) -> bool:
        return self.value.endswith("_adjusted")

    @property
    def base_field(self) -> Optional["GradeField"]:
        """lapso_N_adjusted → lapso_N; None para los demás campos"""
        if not self.is_adjustment:
            return None
        return GradeField(self.value[: -len("_adjusted")])

    @property
    def adjustment_field(self) -> Optional["GradeField"]:
        """lapso_N → lapso_N_adjusted; None para los demás campos"""
        if self.is_adjustment or self is GradeField.REVISION:
            return None
        return GradeField(f"{self.value}_adjusted")


class SubjectStatus(str, Enum):
    APROBADO = "Aprobado"
    PENDIENTE = "Pendiente"
    REPITE = "Repite"
    REVISION = "Revisión"
    ERROR = "Error"


class OverallOutcome(str, Enum):
    APROBADO = "Aprobado"
    REPITE = "Repite"


class HistoryStatus(str, Enum):
    APROBADO = "APROBADO"
    REPROBADO = "REPROBADO"


class SubjectGrade(BaseModel):
    """
    Calificación de un estudiante en una asignatura para un período escolar.
    La nota final no se guarda aquí: siempre se recalcula (services/grading/arithmetic.py).
    """
    subject_id: int                                               # ID de asignatura
    subject_name: Optional[str] = None                            # nombre (solo para mostrar)
    lapso_1: Score = Field(None, ge=0, le=20)                     # 1er lapso
    lapso_2: Score = Field(None, ge=0, le=20)                     # 2do lapso
    lapso_3: Score = Field(None, ge=0, le=20)                     # 3er lapso
    lapso_1_adjusted: Score = Field(None, ge=0, le=20)            # ajuste del 1er lapso
    lapso_2_adjusted: Score = Field(None, ge=0, le=20)            # ajuste del 2do lapso
    lapso_3_adjusted: Score = Field(None, ge=0, le=20)            # ajuste del 3er lapso
    revision: Score = Field(None, ge=0, le=20)                    # nota de revisión (remedial)

    model_config = ConfigDict(frozen=True, from_attributes=True, extra="ignore")

    def get(self, field: GradeField) -> Score:
        return getattr(self, GradeField(field).value)


class StudentEvaluation(BaseModel):
    """Todas las calificaciones de un estudiante en un período (vista efímera)"""
    student_id: Optional[int] = None
    period_id: Optional[int] = None
    subjects: List[SubjectGrade] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("subjects")
    @classmethod
    def _unique_subjects(cls, v: List[SubjectGrade]):
        seen = set()
        for subject in v:
            if subject.subject_id in seen:
                raise ValueError(f"Asignatura duplicada: {subject.subject_id}")
            seen.add(subject.subject_id)
        return v


class EditResult(BaseModel):
    """Resultado de validar una edición: valor utilizable (quizá recortado) + mensaje"""
    value: Score = None
    error: str = ""                        # "" = sin error
    code: Optional[ErrorCode] = None

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.error == ""

    def detail(self) -> Optional[ErrorDetail]:
        if self.ok or self.code is None:
            return None
        return ErrorDetail(code=self.code, message=self.error)


class PeriodAverages(BaseModel):
    p1: Optional[float] = None
    p2: Optional[float] = None
    p3: Optional[float] = None


class SubjectResult(BaseModel):
    subject_id: int
    final_grade: int                       # promedio redondeado de los 3 lapsos (0 si incompleto)
    valid_grade: float                     # revisión si existe, si no la nota final
    status: SubjectStatus
    excluded: bool = False                 # fuera de promedios y conteos
    error: Optional[ErrorDetail] = None    # estado inconsistente (revisión sobrante)


class StudentEvaluationResult(BaseModel):
    student_id: Optional[int] = None
    period_id: Optional[int] = None
    period_averages: PeriodAverages
    final_average: Optional[float] = None
    pending_count: int = 0
    failed_count: int = 0
    remedial_pending_count: int = 0
    overall_outcome: OverallOutcome
    subjects: List[SubjectResult] = Field(default_factory=list)
    inconsistent_subject_ids: List[int] = Field(default_factory=list)


class HistoryRecord(BaseModel):
    """Fila del historial académico (promedio anual + estatus)"""
    student_id: Optional[int] = None
    period_id: Optional[int] = None
    section_id: Optional[int] = None       # grado/sección
    annual_average: float
    status: HistoryStatus

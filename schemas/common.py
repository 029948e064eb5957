"""
schemas/common.py

- Esquemas compartidos por todo el motor de calificaciones
- Pydantic v2
- Contenido:
  1) Códigos de error de política: ErrorCode
  2) Detalle de error (código + mensaje legible): ErrorDetail
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =========================================================
# 1) Códigos de error
# =========================================================

class ErrorCode(str, Enum):
    """Señales de política. Ninguna se lanza como excepción desde el motor."""
    RANGE_ERROR = "RANGE_ERROR"                        # fuera de [0, 20], se recorta
    ADJUSTMENT_BOUND_ERROR = "ADJUSTMENT_BOUND_ERROR"  # ajuste fuera de [original, original + 2]
    NOT_NUMERIC = "NOT_NUMERIC"                        # entrada no numérica, el campo queda vacío
    INCONSISTENT_STATE = "INCONSISTENT_STATE"          # nota aprobatoria con revisión cargada


# =========================================================
# 2) Detalle de error
# =========================================================

class ErrorDetail(BaseModel):
    """Unidad mínima de error: código + mensaje para mostrar en línea"""
    code: ErrorCode = Field(..., description="Código de error (ej: RANGE_ERROR)")
    message: str = Field(..., description="Mensaje legible para el usuario")

    model_config = ConfigDict(extra="ignore", frozen=True)

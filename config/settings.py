"""
config/settings.py

- Lee las variables de entorno (y .env si existe) y las expone como configuración global.
- pydantic v2 / pydantic-settings v2.
- La lista de asignaturas excluidas de promedios y conteos (EXCLUDED_SUBJECT_IDS) se define
  aquí una sola vez y se expone ya parseada como frozenset (@computed_field).
"""

from typing import FrozenSet, Literal
from pydantic import field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _parse_id_list(raw: str) -> FrozenSet[int]:
    # "9, 11" → {9, 11}; las entradas vacías se ignoran
    return frozenset(int(part.strip()) for part in raw.split(",") if part.strip())


class Settings(BaseSettings):
    # =========================
    # App / runtime
    # =========================
    ENV: Literal["dev", "stage", "prod"] = "dev"
    APP_TITLE: str = "Grade Evaluation Engine"
    APP_VERSION: str = "1.0.0"

    # =========================
    # Política académica
    # =========================
    # Asignaturas administrativas (conducta / electivas) fuera de promedios y conteos.
    # Separadas por coma: "9,11"
    EXCLUDED_SUBJECT_IDS: str = "9,11"

    # False → los errores de campo son solo avisos y no impiden guardar
    BLOCK_SAVE_ON_FIELD_ERRORS: bool = False

    @field_validator("EXCLUDED_SUBJECT_IDS", mode="before")
    @classmethod
    def _check_subject_ids(cls, v):
        if isinstance(v, (list, tuple, set, frozenset)):
            v = ",".join(str(item) for item in v)
        try:
            _parse_id_list(str(v))
        except ValueError:
            raise ValueError(f"EXCLUDED_SUBJECT_IDS debe ser una lista de enteros separada por comas: {v!r}")
        return str(v)

    @computed_field  # type: ignore[misc]
    @property
    def excluded_subject_ids(self) -> FrozenSet[int]:
        """
        IDs de asignatura excluidos, ya parseados.
        Es el único punto de donde el evaluador agregado toma la lista por defecto.
        """
        return _parse_id_list(self.EXCLUDED_SUBJECT_IDS)

    # =========================
    # Logging
    # =========================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # =========================
    # BaseSettings Config
    # =========================
    model_config = SettingsConfigDict(
        env_file=".env",               # carga valores desde .env
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",                # claves no definidas se ignoran
    )


# ✅ instancia compartida: from config.settings import settings
settings = Settings()

# services/grading/exceptions.py
# Solo para compuertas del lado de quien llama (guardar, arrastrar pendientes).
# El motor (arithmetic / validation / classifier / aggregate) no lanza estas excepciones.


class GradingError(Exception):
    """Base de los errores de política académica"""


class PendingSubjectsError(GradingError):
    """La selección de asignaturas pendientes no se puede registrar"""

    def __init__(self, message: str, deferred_count: int = 0):
        super().__init__(message)
        self.deferred_count = deferred_count


class SaveBlockedError(GradingError):
    """Hay errores de campo sin resolver y la política bloquea el guardado"""

    def __init__(self, errors: dict):
        super().__init__(f"No se puede guardar: {len(errors)} campo(s) con errores")
        self.errors = errors

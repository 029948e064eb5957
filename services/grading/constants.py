# services/grading/constants.py
# Política académica fija (no configurable por entorno).

MIN_SCORE = 0
MAX_SCORE = 20

# Ajuste autorizado: [original, original + ADJUSTMENT_SPAN]
ADJUSTMENT_SPAN = 2

# Nota final ≥ 9.5 aprueba
PASSING_FINAL_GRADE = 9.5
# Revisión ≥ 10 aprueba
PASSING_REVISION = 10
# Promedio anual ≥ 10 → APROBADO en el historial
PASSING_ANNUAL_AVERAGE = 10

# Con 3 o más asignaturas en revisión reprobada el estudiante repite el año
REPEAT_THRESHOLD = 3
# Máximo de asignaturas que se pueden arrastrar como pendientes
MAX_CARRIED_SUBJECTS = REPEAT_THRESHOLD - 1

LAPSO_COUNT = 3

# Mensajes (se muestran en línea junto al campo)
MSG_MAX_SCORE = f"La calificación máxima es {MAX_SCORE}"
MSG_MIN_SCORE = f"La calificación mínima es {MIN_SCORE}"
MSG_ADJUSTMENT_BELOW = "El ajuste no puede ser menor que la nota original"
MSG_ADJUSTMENT_ABOVE = f"El ajuste no puede ser mayor que la nota original +{ADJUSTMENT_SPAN}"
MSG_NOT_NUMERIC = "La calificación debe ser numérica (usa 8.5 o 8,5)"
MSG_STALE_REVISION = "Asignatura aprobada con nota de revisión cargada: elimine la revisión"

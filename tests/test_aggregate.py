import pytest
from pydantic import ValidationError

from config.settings import settings
from schemas.common import ErrorCode
from schemas.grades import OverallOutcome, StudentEvaluation, SubjectStatus
from services.grading.aggregate import (
    evaluate_student,
    final_average,
    included_subjects,
    period_average,
    resolve_excluded,
    valid_grade,
)
from services.grading.constants import MSG_STALE_REVISION

EXCLUDED = {9, 11}


def test_end_to_end_scenario(graded, make_evaluation):
    evaluation = make_evaluation(
        graded(1, 18),
        graded(2, 17),
        graded(3, 5, revision=12),
        graded(4, 5, revision=8),
        graded(5, 12),
    )
    result = evaluate_student(evaluation, EXCLUDED)

    assert result.pending_count == 1
    assert result.remedial_pending_count == 1
    assert result.failed_count == 2
    assert result.overall_outcome == OverallOutcome.APROBADO
    # nota válida = revisión cuando existe (8 en la asignatura 4): [18, 17, 12, 8, 12] → 13.4
    assert result.final_average == 13.4

    statuses = {r.subject_id: r.status for r in result.subjects}
    assert statuses == {
        1: SubjectStatus.APROBADO,
        2: SubjectStatus.APROBADO,
        3: SubjectStatus.APROBADO,
        4: SubjectStatus.PENDIENTE,
        5: SubjectStatus.APROBADO,
    }
    assert result.period_averages.p1 == 11.4
    assert result.inconsistent_subject_ids == []


def test_three_failed_revisions_repeat_the_year(graded, make_evaluation):
    evaluation = make_evaluation(
        graded(1, 5, revision=8),
        graded(2, 6, revision=9),
        graded(3, 4, revision=2),
        graded(4, 15),
    )
    result = evaluate_student(evaluation, EXCLUDED)
    assert result.remedial_pending_count == 3
    assert result.overall_outcome == OverallOutcome.REPITE
    assert [r.status for r in result.subjects[:3]] == [SubjectStatus.REPITE] * 3


def test_two_failed_revisions_still_promote(graded, make_evaluation):
    evaluation = make_evaluation(
        graded(1, 5, revision=8),
        graded(2, 6, revision=9),
        graded(3, 4),  # sin revisión: pendiente pero no cuenta para repetir
    )
    result = evaluate_student(evaluation, EXCLUDED)
    assert result.remedial_pending_count == 2
    assert result.pending_count == 3
    assert result.overall_outcome == OverallOutcome.APROBADO
    assert result.subjects[0].status == SubjectStatus.PENDIENTE
    assert result.subjects[2].status == SubjectStatus.REVISION


@pytest.mark.parametrize("extreme", [
    dict(lapso_1=0, lapso_2=0, lapso_3=0, revision=0),
    dict(lapso_1=0, lapso_2=0, lapso_3=0),
    dict(lapso_1=20, lapso_2=20, lapso_3=20),
    dict(lapso_1=20, lapso_2=20, lapso_3=20, revision=1),
])
def test_excluded_subjects_never_count(graded, make_subject, make_evaluation, extreme):
    base = [graded(1, 14), graded(2, 7, revision=6), graded(3, 11)]
    noisy = base + [make_subject(subject_id=9, **extreme), make_subject(subject_id=11, **extreme)]

    clean = evaluate_student(make_evaluation(*base), EXCLUDED)
    with_excluded = evaluate_student(make_evaluation(*noisy), EXCLUDED)

    assert with_excluded.period_averages == clean.period_averages
    assert with_excluded.final_average == clean.final_average
    assert with_excluded.pending_count == clean.pending_count
    assert with_excluded.remedial_pending_count == clean.remedial_pending_count
    assert with_excluded.failed_count == clean.failed_count
    assert with_excluded.overall_outcome == clean.overall_outcome

    flagged = {r.subject_id for r in with_excluded.subjects if r.excluded}
    assert flagged == {9, 11}


def test_excluded_subjects_cannot_trigger_repeat(graded, make_evaluation):
    evaluation = make_evaluation(
        graded(1, 5, revision=8),
        graded(2, 5, revision=8),
        graded(9, 5, revision=8),
        graded(11, 5, revision=8),
    )
    assert evaluate_student(evaluation, EXCLUDED).overall_outcome == OverallOutcome.APROBADO
    assert evaluate_student(evaluation, set()).overall_outcome == OverallOutcome.REPITE


def test_period_average_skips_missing_values(make_subject):
    subjects = [
        make_subject(1, l1=10, l2=None),
        make_subject(2, l1=11, l2=14, lapso_1_adjusted=12),
        make_subject(3, l1=None, l2=17),
    ]
    assert period_average(subjects, 1, EXCLUDED) == 11.0
    assert period_average(subjects, 2, EXCLUDED) == 15.5
    assert period_average(subjects, 3, EXCLUDED) is None


def test_period_average_two_decimals(make_subject):
    subjects = [make_subject(1, l1=10), make_subject(2, l1=11), make_subject(3, l1=11)]
    assert period_average(subjects, 1, EXCLUDED) == 10.67


def test_empty_evaluation(make_evaluation):
    result = evaluate_student(make_evaluation(), EXCLUDED)
    assert result.final_average is None
    assert result.period_averages.p1 is None
    assert result.pending_count == 0
    assert result.overall_outcome == OverallOutcome.APROBADO


def test_only_excluded_subjects_average_is_none(graded, make_evaluation):
    result = evaluate_student(make_evaluation(graded(9, 18), graded(11, 3)), EXCLUDED)
    assert result.final_average is None
    assert result.pending_count == 0


def test_revision_replaces_final_grade_in_average(graded):
    assert valid_grade(graded(1, 5, revision=14)) == 14
    assert valid_grade(graded(1, 5)) == 5
    assert final_average([graded(1, 5, revision=14), graded(2, 10)], EXCLUDED) == 12.0


def test_stale_revision_is_listed_as_inconsistent(graded, make_evaluation):
    result = evaluate_student(make_evaluation(graded(1, 15, revision=5), graded(2, 12)), EXCLUDED)
    assert result.inconsistent_subject_ids == [1]
    assert result.subjects[0].status == SubjectStatus.ERROR
    assert result.subjects[0].error.code == ErrorCode.INCONSISTENT_STATE
    assert result.subjects[0].error.message == MSG_STALE_REVISION
    assert result.subjects[1].error is None
    # la revisión sigue siendo la nota válida, pero la asignatura no queda pendiente
    assert result.final_average == 8.5
    assert result.pending_count == 0


def test_incomplete_subject_counts_as_pending(make_subject, make_evaluation):
    result = evaluate_student(make_evaluation(make_subject(1, l1=18, l2=18)), EXCLUDED)
    assert result.subjects[0].final_grade == 0
    assert result.pending_count == 1
    assert result.period_averages.p1 == 18.0


def test_default_exclusion_comes_from_settings(graded):
    assert resolve_excluded(None) == settings.excluded_subject_ids
    subjects = [graded(1, 10), graded(2, 12)]
    assert included_subjects(subjects, [2]) == [subjects[0]]


def test_duplicate_subjects_are_rejected(graded):
    with pytest.raises(ValidationError):
        StudentEvaluation(subjects=[graded(1, 10), graded(1, 12)])

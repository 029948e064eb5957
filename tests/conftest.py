import pytest

from schemas.grades import StudentEvaluation, SubjectGrade


def _subject(subject_id=1, l1=None, l2=None, l3=None, **kwargs):
    # kwargs con nombre de campo (lapso_1=...) tienen prioridad sobre l1/l2/l3
    fields = dict(lapso_1=l1, lapso_2=l2, lapso_3=l3)
    fields.update(kwargs)
    return SubjectGrade(subject_id=subject_id, **fields)


def _graded(subject_id, grade, revision=None):
    # los tres lapsos iguales → nota final == grade
    return SubjectGrade(subject_id=subject_id, lapso_1=grade, lapso_2=grade, lapso_3=grade, revision=revision)


@pytest.fixture
def make_subject():
    return _subject


@pytest.fixture
def graded():
    return _graded


@pytest.fixture
def make_evaluation():
    def _make(*subjects, student_id=1, period_id=2024):
        return StudentEvaluation(student_id=student_id, period_id=period_id, subjects=list(subjects))
    return _make

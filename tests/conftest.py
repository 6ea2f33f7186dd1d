import pytest

from app.sample_data import load_sample_dataframe, sample_roster
from student_dashboard.dashboard import Dashboard
from student_dashboard.models import SUBJECTS, Student


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def names(self):
        return [name for name, _ in self.calls]

    def last(self, name):
        return next(arg for call, arg in reversed(self.calls) if call == name)

    def render_roster(self, view, selection):
        self.calls.append(("render_roster", list(view)))

    def render_insight(self, panel):
        self.calls.append(("render_insight", panel))

    def draw_radar(self, chart):
        self.calls.append(("draw_radar", chart))

    def draw_empty_radar(self, chart):
        self.calls.append(("draw_empty_radar", chart))

    def draw_comparison(self, chart):
        self.calls.append(("draw_comparison", chart))

    def close_comparison(self):
        self.calls.append(("close_comparison", None))


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def make_student(student_id, marks, roll_no=None, name=None):
    if isinstance(marks, int):
        marks = [marks] * len(SUBJECTS)
    return Student(
        id=student_id,
        roll_no=roll_no or str(student_id),
        name=name or f"Student {student_id}",
        marks=dict(zip(SUBJECTS, marks)),
    )


@pytest.fixture()
def roster():
    return sample_roster()


@pytest.fixture()
def sample_df():
    return load_sample_dataframe()


@pytest.fixture()
def renderer():
    return RecordingRenderer()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def dashboard(roster, renderer, clock):
    return Dashboard(roster, renderer=renderer, clock=clock)


@pytest.fixture()
def student_factory():
    return make_student

from student_dashboard.charts import comparison_chart, empty_radar_chart, radar_chart
from student_dashboard.metrics import rank_students, ranked_frame
from student_dashboard.plots import average_bar, figure_from_primitives, grade_pie


def test_radar_figure_shapes(roster):
    chart = radar_chart(roster[0], 400, 400)
    fig = figure_from_primitives(chart.primitives, chart.width, chart.height)
    kinds = [shape.type for shape in fig.layout.shapes]
    # 5 grid rings + 5 point markers, 5 axes, 1 polygon
    assert kinds.count("circle") == 10
    assert kinds.count("line") == 5
    assert kinds.count("path") == 1
    assert len(fig.layout.annotations) == 10
    assert tuple(fig.layout.yaxis.range) == (400, 0)


def test_empty_radar_figure(roster):
    chart = empty_radar_chart(400, 400)
    fig = figure_from_primitives(chart.primitives, chart.width, chart.height)
    assert [shape.type for shape in fig.layout.shapes].count("path") == 0


def test_comparison_figure_has_bars(roster):
    chart = comparison_chart(roster[0], roster[1], 600, 350)
    fig = figure_from_primitives(chart.primitives, chart.width, chart.height, title="Comparison")
    assert [shape.type for shape in fig.layout.shapes].count("rect") == 10
    assert fig.layout.title.text == "Comparison"


def test_overview_figures(roster):
    frame = ranked_frame(rank_students(roster))
    assert len(average_bar(frame).data) > 0
    assert len(grade_pie(frame).data) == 1
    assert len(average_bar(frame.iloc[0:0]).data) == 0
